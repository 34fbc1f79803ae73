# loanapi/models.py
import enum

from sqlalchemy import Column, Integer, String, Float, Boolean, ForeignKey, Enum
from sqlalchemy.orm import relationship

from loanapi.database import Base


class Role(str, enum.Enum):
    REGULAR_USER = "RegularUser"
    ACCOUNTANT = "Accountant"


class LoanType(str, enum.Enum):
    AUTO = "Auto"
    RAPID = "Rapid"
    INSURANCE = "Insurance"


class Currency(str, enum.Enum):
    GEL = "GEL"
    EUR = "EUR"
    USD = "USD"


class LoanStatus(str, enum.Enum):
    IN_PROGRESS = "InProgress"
    APPROVED = "Approved"
    DECLINED = "Declined"


def _enum_column(enum_cls):
    # stored by value ("InProgress", "Accountant"...) as plain strings
    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
    )


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    age = Column(Integer, nullable=False)
    salary = Column(Float, nullable=False, default=0)
    is_blocked = Column(Boolean, nullable=False, default=False)
    password_hash = Column(String, nullable=False)
    role = Column(_enum_column(Role), nullable=False, default=Role.REGULAR_USER)

    loans = relationship(
        "Loan",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"


class Loan(Base):
    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, index=True)
    loan_type = Column(_enum_column(LoanType), nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(_enum_column(Currency), nullable=False)
    loan_period = Column(Integer, nullable=False)
    status = Column(_enum_column(LoanStatus), nullable=False, default=LoanStatus.IN_PROGRESS)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="loans")

    def __repr__(self):
        return f"<Loan {self.id} {self.loan_type} {self.status} for User {self.user_id}>"
