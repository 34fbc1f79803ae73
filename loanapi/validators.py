# loanapi/validators.py
import math
from dataclasses import dataclass, field
from typing import List, Optional

from loanapi.models import Currency, LoanStatus, LoanType, Role


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def message(self) -> str:
        return "; ".join(self.errors)


def parse_enum(enum_cls, value):
    """Returns the enum member for value, or None when it is not recognized."""
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _text_at_least(value: Optional[str], n: int) -> bool:
    return bool(value) and bool(value.strip()) and len(value) >= n


def _finite(value) -> bool:
    return value is not None and math.isfinite(value)


def _number_at_least(value, n) -> bool:
    return _finite(value) and value >= n


# =========================
# USER REGISTRATION
# =========================
def validate_user_register(payload) -> ValidationResult:
    result = ValidationResult()

    if not _text_at_least(payload.first_name, 2):
        result.errors.append("User Name Is Required")
    if not _text_at_least(payload.last_name, 2):
        result.errors.append("User Surname Is Required")
    if not _text_at_least(payload.username, 6):
        result.errors.append("Username Must Be At Least 6 Characters Long")
    if not _number_at_least(payload.age, 18):
        result.errors.append("User Must Be More Than 18 Years Old")
    if not _number_at_least(payload.salary, 0):
        result.errors.append("User Salary Is Required")
    if not _text_at_least(payload.password, 8):
        result.errors.append("Password Must Be At Least 8 Characters Long")
    if parse_enum(Role, payload.role) is None:
        result.errors.append("Please Select The Role")

    return result


# =========================
# LOANS
# =========================
def _loan_field_errors(payload) -> List[str]:
    errors = []
    if parse_enum(LoanType, payload.loan_type) is None:
        errors.append("Please Select The Correct Loan Type")
    if not (_finite(payload.amount) and payload.amount > 1000):
        errors.append("Please Indicate The Amount > 1000")
    if parse_enum(Currency, payload.currency) is None:
        errors.append("Please Select The Correct Currency")
    if not _number_at_least(payload.loan_period, 1):
        errors.append("Loan Period Must Be Greater Than 0")
    return errors


def validate_loan_register(payload) -> ValidationResult:
    return ValidationResult(errors=_loan_field_errors(payload))


def validate_loan_update(payload) -> ValidationResult:
    errors = _loan_field_errors(payload)
    # status is optional here; the accountant gate requires it separately
    if payload.status is not None and parse_enum(LoanStatus, payload.status) is None:
        errors.append("Please Select The Correct Status")
    return ValidationResult(errors=errors)
