"""Error Hierarchy — every way a ledger operation can be rejected or fail.

Invariants:
    - Every error carries a code, an ErrorCategory, an ErrorSeverity and an HTTP status
    - Rejections (400/401/404) are expected outcomes of a request; the unit of
      work that raised them has been rolled back and may be resubmitted as-is
      only if its inputs change
    - TransientConflictError is the only retryable error; it stays apart from the
      rejections so the unit-of-work runner can never retry a business rule
    - Callers dispatch on class or code; message text is for display only
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Which account and item an error concerns, plus retry hints."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    account_id: int | None = None
    item_name: str | None = None
    retry_after_ms: int | None = None


class MerchShopError(Exception):
    retryable = False

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Error envelope returned by the API."""
        ctx = self.context
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "retryable": self.retryable,
                "timestamp": ctx.timestamp.isoformat(),
                "context": {
                    "account_id": ctx.account_id,
                    "item_name": ctx.item_name,
                    "retry_after_ms": ctx.retry_after_ms,
                },
            }
        }


# ─── Business Errors (400-level) ────────────────────────────────

class ItemNotFoundError(MerchShopError):
    """Purchase references an item that is not in the catalog."""
    def __init__(self, item_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.item_name = item_name
        super().__init__(
            f"Item '{item_name}' not found",
            "ITEM_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 400,
        )
        self.item_name = item_name


class InvalidQuantityError(MerchShopError):
    """Purchase quantity is not positive."""
    def __init__(self, quantity: int, context: ErrorContext | None = None):
        super().__init__(
            f"Quantity must be positive, got {quantity}",
            "INVALID_QUANTITY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.quantity = quantity


class InvalidAmountError(MerchShopError):
    """Transfer amount is not positive."""
    def __init__(self, amount: int, context: ErrorContext | None = None):
        super().__init__(
            f"Amount must be positive, got {amount}",
            "INVALID_AMOUNT", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.amount = amount


class InsufficientFundsError(MerchShopError):
    """Conditional debit matched no row: balance too low."""
    def __init__(self, account_id: int, required: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.account_id = account_id
        super().__init__(
            f"Insufficient funds: {required} coins required",
            "INSUFFICIENT_FUNDS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, ctx, 400,
        )
        self.account_id = account_id
        self.required = required


class SelfTransferError(MerchShopError):
    """Sender and receiver are the same account."""
    def __init__(self, account_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.account_id = account_id
        super().__init__(
            "Cannot transfer coins to yourself",
            "SELF_TRANSFER", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, ctx, 400,
        )


class AccountNotFoundError(MerchShopError):
    """Referenced account does not exist."""
    def __init__(self, account_ref: int | str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        if isinstance(account_ref, int):
            ctx.account_id = account_ref
        super().__init__(
            f"Account '{account_ref}' not found",
            "ACCOUNT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )
        self.account_ref = account_ref


class AuthenticationError(MerchShopError):
    """Missing, invalid or expired credentials."""
    def __init__(self, message: str = "Unauthorized", context: ErrorContext | None = None):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(MerchShopError):
    """Database operation failed."""
    def __init__(
        self,
        message: str,
        operation: str,
        context: ErrorContext | None = None,
        code: str = "DATABASE_ERROR",
        category: ErrorCategory = ErrorCategory.DATABASE,
        http_status: int = 500,
    ):
        super().__init__(
            f"Database {operation} failed: {message}",
            code, category, ErrorSeverity.CRITICAL, context, http_status,
        )
        self.operation = operation


class StoreUnavailableError(DatabaseError):
    """Connectivity or infrastructure failure talking to the ledger store."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            message, operation, context,
            code="STORE_UNAVAILABLE", http_status=503,
        )


class TransientConflictError(DatabaseError):
    """Serializable unit of work aborted by a concurrent conflict; safe to retry."""
    retryable = True

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            message, operation, context,
            code="TRANSIENT_CONFLICT", category=ErrorCategory.CONFLICT,
            http_status=409,
        )
        self.severity = ErrorSeverity.ERROR


class RequestTimeoutError(MerchShopError):
    """Unit of work did not finish before the request deadline."""
    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"Operation exceeded the {timeout_seconds}s request deadline",
            "REQUEST_TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.ERROR, context, 504,
        )
