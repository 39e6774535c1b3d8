"""Execution state: per-leg status, settlement and the run as a whole."""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Optional

from hyprdeposit.execution.errors import ErrorKind
from hyprdeposit.optimizer.models import BridgeOption


class LegStatus(str, Enum):
    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (LegStatus.COMPLETED, LegStatus.FAILED)


class RunStatus(str, Enum):
    IDLE = "idle"
    APPROVING = "approving"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class BridgeExecution:
    """One leg of a running strategy."""

    option: BridgeOption
    status: LegStatus = LegStatus.PENDING
    percent: int = 0
    message: str = ""
    tx_hash: Optional[str] = None
    tx_link: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


@dataclass
class SettlementState:
    """The final transfer to the settlement address."""

    status: LegStatus = LegStatus.PENDING
    amount_usd: Optional[Decimal] = None
    tx_hash: Optional[str] = None
    error: Optional[str] = None


@dataclass
class ExecutionProgress:
    """Aggregate progress of one execution run."""

    status: RunStatus = RunStatus.IDLE
    message: str = ""
    legs: list[BridgeExecution] = field(default_factory=list)
    settlement: Optional[SettlementState] = None
    current_index: Optional[int] = None

    @property
    def completed_count(self) -> int:
        return sum(1 for leg in self.legs if leg.status == LegStatus.COMPLETED)

    @property
    def failed_count(self) -> int:
        return sum(1 for leg in self.legs if leg.status == LegStatus.FAILED)

    @property
    def is_finished(self) -> bool:
        return self.status in (RunStatus.COMPLETED, RunStatus.FAILED)

    @property
    def headline(self) -> str:
        """Short summary of where the run ended up."""
        if not self.is_finished:
            return "Bridging..."
        if self.settlement and self.settlement.status == LegStatus.COMPLETED:
            return "Partially Complete" if self.failed_count else "Deposit Complete!"
        if self.settlement and self.settlement.status == LegStatus.FAILED:
            return "Deposit Failed"
        return "Bridges Failed"

    def snapshot(self) -> "ExecutionProgress":
        """Copy that later state changes will not affect."""
        return ExecutionProgress(
            status=self.status,
            message=self.message,
            legs=[replace(leg) for leg in self.legs],
            settlement=replace(self.settlement) if self.settlement else None,
            current_index=self.current_index,
        )
