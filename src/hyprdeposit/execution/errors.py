"""Classification of execution failures into user-facing messages."""

from dataclasses import dataclass
from enum import Enum

from hyprdeposit.exceptions import UserRejectedError

# Raw messages longer than this are truncated
MAX_RAW_MESSAGE_LENGTH = 100

# Wallet messages meaning the signature was refused
REJECTION_MARKERS = (
    "user rejected",
    "user denied",
    "user cancelled",
    "user canceled",
    "rejected the request",
    "bundle id is unknown",
    "has not been submitted",
    "no matching bundle",
    "action_rejected",
)


class ErrorKind(str, Enum):
    USER_REJECTED = "user_rejected"
    QUOTE_EXPIRED = "quote_expired"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NETWORK = "network"
    SLIPPAGE = "slippage"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClassifiedError:
    kind: ErrorKind
    message: str

    @property
    def is_fatal(self) -> bool:
        """A refused signature stops the whole run."""
        return self.kind == ErrorKind.USER_REJECTED


def is_user_rejection(message: str) -> bool:
    """Check if an error message means the user refused to sign."""
    lower = message.lower()
    return any(marker in lower for marker in REJECTION_MARKERS)


def classify_error_message(message: str) -> ClassifiedError:
    """Map a raw collaborator error message to a kind and a readable message."""
    lower = message.lower()

    if is_user_rejection(message):
        return ClassifiedError(
            ErrorKind.USER_REJECTED,
            "Transaction cancelled. You rejected the transaction in your wallet.",
        )

    if "must be equal to constant" in lower:
        return ClassifiedError(
            ErrorKind.QUOTE_EXPIRED,
            "Quote expired. The amount changed since the quote was fetched. Please try again.",
        )

    if "insufficient" in lower or "not enough" in lower or "exceeds balance" in lower:
        return ClassifiedError(
            ErrorKind.INSUFFICIENT_FUNDS,
            "Insufficient funds. You may not have enough tokens or gas to complete this transaction.",
        )

    if any(marker in lower for marker in ("network", "rpc", "timeout", "connection")):
        return ClassifiedError(
            ErrorKind.NETWORK,
            "Network error. Please check your connection and try again.",
        )

    if "slippage" in lower or "price impact" in lower:
        return ClassifiedError(
            ErrorKind.SLIPPAGE,
            "Price changed too much. Please try again with a smaller amount.",
        )

    if "validation" in lower:
        return ClassifiedError(
            ErrorKind.VALIDATION,
            "Validation failed. Please go back and try again with a fresh quote.",
        )

    if len(message) > MAX_RAW_MESSAGE_LENGTH:
        message = message[:MAX_RAW_MESSAGE_LENGTH] + "..."
    return ClassifiedError(ErrorKind.UNKNOWN, message)


def classify_execution_error(error: BaseException) -> ClassifiedError:
    """Classify an exception raised while executing a leg or the settlement."""
    if isinstance(error, UserRejectedError):
        return classify_error_message("user rejected")
    return classify_error_message(str(error) or type(error).__name__)
