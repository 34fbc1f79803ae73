# loanapi/services.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from loanapi import policy
from loanapi.auth import create_access_token
from loanapi.models import Currency, Loan, LoanStatus, LoanType, Role, User
from loanapi.policy import RequestContext
from loanapi.results import ServiceResult, Status
from loanapi.security import hash_password, verify_password
from loanapi.validators import (
    parse_enum,
    validate_loan_register,
    validate_loan_update,
    validate_user_register,
)

logger = logging.getLogger(__name__)


class LoanService:
    """
    One method per operation. Each method looks up its target, validates,
    runs the policy gates in order and only then mutates and commits once.
    Failures come back as a ServiceResult, never as an exception.
    """

    def __init__(self, db: Session):
        self.db = db

    # ----------------------------
    # Lookups
    # ----------------------------
    def _user(self, user_id):
        if user_id is None:
            return None
        return self.db.query(User).filter(User.id == user_id).first()

    def _loan(self, loan_id):
        return self.db.query(Loan).filter(Loan.id == loan_id).first()

    def _denied(self, decision: policy.Decision, operation: str) -> ServiceResult:
        logger.info("%s denied: %s (%s)", operation, decision.reason, decision.status.value)
        return decision.as_result()

    # =========================
    # AUTH
    # =========================
    def login(self, username: str, password: str) -> ServiceResult:
        user = self.db.query(User).filter(User.username == username).first()
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %r", username)
            return ServiceResult.fail(Status.UNAUTHORIZED, "Invalid username or password")

        return ServiceResult.ok("token Generated Successfully", create_access_token(user))

    # =========================
    # USERS
    # =========================
    def get_current_user(self, ctx: RequestContext) -> ServiceResult:
        user = self._user(ctx.requester_id)
        decision = policy.decide_read_profile(ctx, user)
        if not decision.allowed:
            return self._denied(decision, "get_current_user")
        return ServiceResult.ok("User Information Successfully Loaded", user)

    def get_users(self) -> ServiceResult:
        users = self.db.query(User).order_by(User.id.asc()).all()
        return ServiceResult.ok("Users Successfully Loaded", users)

    def get_user(self, user_id: int) -> ServiceResult:
        user = self._user(user_id)
        if user is None:
            return ServiceResult.fail(Status.NOT_FOUND, "User not found")
        return ServiceResult.ok("User Successfully Loaded", user)

    def add_user(self, payload) -> ServiceResult:
        validation = validate_user_register(payload)
        if not validation.is_valid:
            return ServiceResult.fail(Status.BAD_REQUEST, validation.message)

        if self.db.query(User).filter(User.username == payload.username).first():
            return ServiceResult.fail(Status.CONFLICT, "Username already exists")

        user = User(
            first_name=payload.first_name,
            last_name=payload.last_name,
            username=payload.username,
            age=payload.age,
            salary=payload.salary,
            is_blocked=False,
            role=parse_enum(Role, payload.role),
            password_hash=hash_password(payload.password),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # lost a race against another registration of the same username
            self.db.rollback()
            return ServiceResult.fail(Status.CONFLICT, "Username already exists")

        self.db.refresh(user)
        logger.info("User %r registered as %s", user.username, user.role.value)
        return ServiceResult.ok("User added successfully!", user)

    def delete_user(self, user_id: int, ctx: RequestContext) -> ServiceResult:
        user = self._user(user_id)
        decision = policy.decide_delete_user(ctx, user)
        if not decision.allowed:
            return self._denied(decision, "delete_user")

        self.db.delete(user)
        self.db.commit()
        logger.info("User %s deleted by %s", user_id, ctx.requester_id)
        return ServiceResult.ok(f"Successfully deleted user with id {user_id}")

    def change_user_status(self, user_id: int, is_blocked: bool) -> ServiceResult:
        user = self._user(user_id)
        if user is None:
            return ServiceResult.fail(Status.NOT_FOUND, "No User With Provided Id")

        user.is_blocked = is_blocked
        self.db.commit()
        self.db.refresh(user)
        logger.info("User %s is_blocked=%s", user_id, is_blocked)
        return ServiceResult.ok("Successfully Updated The User Status", user)

    # =========================
    # LOANS
    # =========================
    def get_loans(self, ctx: RequestContext) -> ServiceResult:
        decision = policy.decide_list_loans(ctx)
        if not decision.allowed:
            return self._denied(decision, "get_loans")

        query = self.db.query(Loan)
        if not ctx.is_accountant:
            query = query.filter(Loan.user_id == ctx.requester_id)
        loans = query.order_by(Loan.id.asc()).all()

        decision = policy.decide_listed_loans(ctx, loans)
        if not decision.allowed:
            return self._denied(decision, "get_loans")
        return ServiceResult.ok("Loans Successfully Loaded", loans)

    def get_loan_by_id(self, loan_id: int, ctx: RequestContext) -> ServiceResult:
        loan = self._loan(loan_id)
        decision = policy.decide_read_loan(ctx, loan)
        if not decision.allowed:
            return self._denied(decision, "get_loan_by_id")
        return ServiceResult.ok("Loan Identified Successfully!", loan)

    def add_loan(self, payload, ctx: RequestContext) -> ServiceResult:
        validation = validate_loan_register(payload)
        if not validation.is_valid:
            return ServiceResult.fail(Status.BAD_REQUEST, validation.message)

        user = self._user(ctx.requester_id)
        decision = policy.decide_create_loan(ctx, user)
        if not decision.allowed:
            return self._denied(decision, "add_loan")

        loan = Loan(
            loan_type=parse_enum(LoanType, payload.loan_type),
            amount=payload.amount,
            currency=parse_enum(Currency, payload.currency),
            loan_period=payload.loan_period,
            status=LoanStatus.IN_PROGRESS,
            user_id=user.id,
        )
        self.db.add(loan)
        self.db.commit()
        self.db.refresh(loan)
        logger.info("Loan %s added for user %s", loan.id, user.id)
        return ServiceResult.ok("Loan added successfully!", loan)

    def delete_loan(self, loan_id: int, ctx: RequestContext) -> ServiceResult:
        loan = self._loan(loan_id)
        decision = policy.decide_delete_loan(ctx, loan)
        if not decision.allowed:
            return self._denied(decision, "delete_loan")

        self.db.delete(loan)
        self.db.commit()
        logger.info("Loan %s deleted by %s", loan_id, ctx.requester_id)
        return ServiceResult.ok(f"Successfully deleted loan with id {loan_id}")

    def update_loan(self, loan_id: int, payload, ctx: RequestContext) -> ServiceResult:
        loan = self._loan(loan_id)
        decision = policy.exists(loan, "No loan found to update.")
        if not decision.allowed:
            return self._denied(decision, "update_loan")

        validation = validate_loan_update(payload)
        if not validation.is_valid:
            return ServiceResult.fail(Status.BAD_REQUEST, validation.message)

        new_status = parse_enum(LoanStatus, payload.status)
        decision = policy.decide_update_loan(ctx, loan, new_status)
        if not decision.allowed:
            return self._denied(decision, "update_loan")

        loan.loan_type = parse_enum(LoanType, payload.loan_type)
        loan.amount = payload.amount
        loan.currency = parse_enum(Currency, payload.currency)
        loan.loan_period = payload.loan_period
        if ctx.is_accountant:
            loan.status = new_status

        self.db.commit()
        self.db.refresh(loan)
        logger.info("Loan %s updated by %s (status %s)", loan_id, ctx.requester_id, loan.status.value)
        return ServiceResult.ok(f"Successfully updated loan with id {loan_id}.", loan)
