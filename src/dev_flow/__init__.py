"""Git branching workflow automation: sync, compact, publish, release."""

__version__ = "0.3.0"
