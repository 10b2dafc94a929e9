"""Configuration management for dev-flow."""

from dataclasses import dataclass

from dev_flow.errors import FlowError
from dev_flow.operations.executor import GitExecutor


@dataclass(frozen=True, slots=True)
class FlowConfig:
    """Immutable settings for a session, read from ``git config``."""

    remote: str = "origin"
    feature_prefix: str = "feat/"
    release_prefix: str = "release/"
    trunk: str | None = None
    message_command: str | None = None
    recent_branches: int = 5


class FlowConfigManager:
    """Read flow settings stored in git config."""

    CONFIG_PREFIX = "flow."

    def __init__(self, executor: GitExecutor):
        self.executor = executor

    def _get(self, name: str) -> str | None:
        value = self.executor.get_config(f"{self.CONFIG_PREFIX}{name}")
        return value or None

    def _get_int(self, name: str, default: int) -> int:
        value = self._get(name)
        if value is None:
            return default
        try:
            number = int(value)
        except ValueError:
            raise FlowError(f"{self.CONFIG_PREFIX}{name} must be an integer, got '{value}'")
        if number < 1:
            raise FlowError(f"{self.CONFIG_PREFIX}{name} must be positive, got {number}")
        return number

    def load(self) -> FlowConfig:
        """Build a FlowConfig, falling back to defaults for unset keys."""
        defaults = FlowConfig()
        return FlowConfig(
            remote=self._get("remote") or defaults.remote,
            feature_prefix=self._get("featurePrefix") or defaults.feature_prefix,
            release_prefix=self._get("releasePrefix") or defaults.release_prefix,
            trunk=self._get("trunk"),
            message_command=self._get("messageCommand"),
            recent_branches=self._get_int("recentBranches", defaults.recent_branches),
        )

    def resolve_trunk(self, config: FlowConfig) -> str:
        """Return the configured trunk, else main if the remote has it, else master."""
        if config.trunk:
            return config.trunk
        if f"{config.remote}/main" in self.executor.remote_branches():
            return "main"
        return "master"
