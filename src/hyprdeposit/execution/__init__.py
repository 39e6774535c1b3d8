"""Sequential strategy execution and settlement."""

from hyprdeposit.execution.engine import SequentialExecutor
from hyprdeposit.execution.errors import (
    ClassifiedError,
    ErrorKind,
    classify_error_message,
    classify_execution_error,
    is_user_rejection,
)
from hyprdeposit.execution.progress import (
    BridgeExecution,
    ExecutionProgress,
    LegStatus,
    RunStatus,
    SettlementState,
)

__all__ = [
    "BridgeExecution",
    "ClassifiedError",
    "ErrorKind",
    "ExecutionProgress",
    "LegStatus",
    "RunStatus",
    "SequentialExecutor",
    "SettlementState",
    "classify_error_message",
    "classify_execution_error",
    "is_user_rejection",
]
