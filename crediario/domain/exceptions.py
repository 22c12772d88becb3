"""Domain-specific exceptions"""

from decimal import Decimal
from typing import List


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationFailure(DomainException):
    """Input rejected before any side effect"""

    pass


class InvalidScheduleInput(ValidationFailure):
    """Installment count, frequency or first due date is not acceptable"""

    pass


class InvalidDateInput(InvalidScheduleInput):
    """Date text is malformed, not a calendar date, or out of the allowed year range"""

    pass


class InvalidAmount(ValidationFailure):
    """Transaction amount must be strictly positive"""

    pass


class FormValidationError(ValidationFailure):
    """Debt operation form has one or more invalid fields"""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class ConflictError(DomainException):
    """Request conflicts with existing ledger state"""

    pass


class DuplicateAccount(ConflictError):
    """A credit account already exists for this customer phone"""

    def __init__(self, phone: str, account=None):
        self.phone = phone
        self.account = account
        super().__init__(f"Credit account already exists for phone {phone}")


class ExistingCreditAccount(ConflictError):
    """Customer already has credit; the new-credit flow must stop and show the account"""

    def __init__(self, account):
        self.account = account
        super().__init__(f"Customer already has credit account {account.id}")


class NonZeroBalance(ConflictError):
    """Account with outstanding debt cannot be deleted"""

    def __init__(self, account_id: str, balance: Decimal):
        self.account_id = account_id
        self.balance = balance
        super().__init__(f"Account {account_id} still owes {balance}")


class AccountNotFound(DomainException):
    """Credit account does not exist for this owner"""

    pass


class StockValidationError(DomainException):
    """One or more line items exceed available stock"""

    def __init__(self, issues: list):
        self.issues = issues
        super().__init__(
            ", ".join(
                f"{issue.product_name}: disponível {issue.available}, solicitado {issue.requested}"
                for issue in issues
            )
        )


class RemoteServiceError(DomainException):
    """Backend collaborator unavailable or returned an error"""

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service}: {message}")
