"""Domain errors shared by every component.

Each error carries a stable ``code`` so API clients can branch on the cause
instead of the message text, and an HTTP status used by the REST layer.
"""

from typing import Any, Dict, Optional


class BudgetFlowError(Exception):
    """Base class for all expected business-rule failures."""
    code = "budgetflow_error"
    title = "BudgetFlow Error"
    status_code = 400

    def __init__(self, detail: str = "", **extra: Any) -> None:
        super().__init__(detail or self.title)
        self.detail = detail or self.title
        self.extra = extra

    def to_problem(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": "about:blank",
            "title": self.title,
            "status": self.status_code,
            "code": self.code,
            "detail": self.detail,
        }
        payload.update(self.extra)
        return payload


class NotFound(BudgetFlowError):
    code = "not_found"
    title = "Not Found"
    status_code = 404


class InvalidState(BudgetFlowError):
    code = "invalid_state"
    title = "Invalid State"
    status_code = 409


class InsufficientFunds(BudgetFlowError):
    code = "insufficient_funds"
    title = "Insufficient Funds"
    status_code = 409


class ReferenceConflict(BudgetFlowError):
    """Deletion refused because other records still reference the target."""
    code = "reference_conflict"
    title = "Reference Conflict"
    status_code = 409

    def __init__(self, detail: str = "", reason: Optional[str] = None) -> None:
        super().__init__(detail, reason=reason)
        self.reason = reason


class ValidationFailed(BudgetFlowError):
    code = "validation_error"
    title = "Unprocessable Entity"
    status_code = 422


class TransactionConflict(BudgetFlowError):
    code = "transaction_conflict"
    title = "Transaction Conflict"
    status_code = 409
