from dev_flow.operations.config import FlowConfig, FlowConfigManager
from dev_flow.operations.executor import GitExecutor, GitResult
from dev_flow.operations.models import (
    CompactionOutcome,
    CompactionResult,
    PublishOutcome,
    RebaseOutcome,
    Session,
    SessionState,
    SyncOutcome,
    SyncReport,
)

from .safety import SafetyGate
from .rebaser import Rebaser
from .compactor import Compactor
from .publisher import Publisher
from .session import FeatureSync
from .trunk import TrunkStrategy, TrunkSync
from .release import ReleaseManager
