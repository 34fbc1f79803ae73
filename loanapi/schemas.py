# loanapi/schemas.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from loanapi.models import Currency, LoanStatus, LoanType, Role


# =========================
# REQUESTS
# =========================
# Enum-typed fields arrive as plain strings; loanapi.validators decides
# whether they are recognized so every violation is reported at once.

class UserLogin(BaseModel):
    username: str
    password: str


class UserRegister(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    age: Optional[int] = None
    salary: Optional[float] = None
    role: Optional[str] = None


class LoanRegister(BaseModel):
    loan_type: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    loan_period: Optional[int] = None


class LoanUpdate(LoanRegister):
    status: Optional[str] = None


# =========================
# RESPONSES
# =========================
class Message(BaseModel):
    message: str


class Token(BaseModel):
    token: str


class LoanOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    loan_type: LoanType
    amount: float
    currency: Currency
    loan_period: int
    status: LoanStatus
    user_id: int


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    username: str
    age: int
    salary: float
    is_blocked: bool
    role: Role
    loans: List[LoanOut] = []
