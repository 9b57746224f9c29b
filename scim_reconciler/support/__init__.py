from .config_manager import ConfigManager
from .logger import Logger
from .stats import Stats
from .pools import Pools
from .throttled_pool import ThrottledThreadPoolExecutor
from .results import (
    MembershipDelta,
    MutationKind,
    MutationOutcome,
    MutationStatus,
    ReconcileStatus,
    ReconciliationResult,
)

__all__ = [
    "Pools",
    "ConfigManager",
    "Logger",
    "Stats",
    "ThrottledThreadPoolExecutor",
    "MembershipDelta",
    "MutationKind",
    "MutationOutcome",
    "MutationStatus",
    "ReconcileStatus",
    "ReconciliationResult",
]
