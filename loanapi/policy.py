# loanapi/policy.py
"""
Role and ownership rules for loans and users.

Every decide_* function evaluates its gates in a fixed order and returns the
first failing one as a Decision; ALLOW means every gate passed. Nothing here
touches the session: lookups happen in the service, which hands the entities
(or None) to the policy.
"""
from dataclasses import dataclass
from typing import Optional

from loanapi.models import LoanStatus, Role
from loanapi.results import ServiceResult, Status


@dataclass(frozen=True)
class RequestContext:
    requester_id: Optional[int]
    role: Optional[Role]

    @property
    def is_accountant(self) -> bool:
        return self.role == Role.ACCOUNTANT

    @property
    def is_regular_user(self) -> bool:
        return self.role == Role.REGULAR_USER


@dataclass(frozen=True)
class Decision:
    allowed: bool
    status: Status = Status.SUCCESS
    reason: str = ""

    def as_result(self) -> ServiceResult:
        return ServiceResult.fail(self.status, self.reason)


ALLOW = Decision(True)


def deny(status: Status, reason: str) -> Decision:
    return Decision(False, status, reason)


def exists(entity, reason: str) -> Decision:
    if entity is None:
        return deny(Status.NOT_FOUND, reason)
    return ALLOW


def requester_known(ctx: RequestContext, reason: str) -> Decision:
    if ctx.requester_id is None:
        return deny(Status.NOT_FOUND, reason)
    return ALLOW


# =========================
# PROFILE
# =========================
def decide_read_profile(ctx: RequestContext, user) -> Decision:
    decision = requester_known(ctx, "User ID Not Found")
    if not decision.allowed:
        return decision
    return exists(user, "User Information Not Found")


# =========================
# LOANS
# =========================
def decide_list_loans(ctx: RequestContext) -> Decision:
    if ctx.is_accountant:
        return ALLOW
    if ctx.is_regular_user:
        return requester_known(ctx, "User ID Not Found")
    return deny(Status.FORBIDDEN, "Not Allowed To Access Loans")


def decide_listed_loans(ctx: RequestContext, loans) -> Decision:
    # a regular user with nothing to show gets NotFound, not an empty list
    if ctx.is_regular_user and not loans:
        return deny(Status.NOT_FOUND, "No loans found for this user.")
    return ALLOW


def decide_read_loan(ctx: RequestContext, loan) -> Decision:
    decision = exists(loan, "Loan not found.")
    if not decision.allowed:
        return decision

    if ctx.is_regular_user:
        if ctx.requester_id is None:
            return deny(Status.NOT_FOUND, "User ID not found.")
        if loan.user_id != ctx.requester_id:
            return deny(Status.FORBIDDEN, "You cannot access another user's loan.")
    return ALLOW


def decide_create_loan(ctx: RequestContext, user) -> Decision:
    decision = requester_known(ctx, "User ID Not Found")
    if not decision.allowed:
        return decision

    decision = exists(user, "User Not Found")
    if not decision.allowed:
        return decision

    if user.is_blocked:
        return deny(Status.FORBIDDEN, "User is blocked and cannot perform this action.")
    return ALLOW


def decide_delete_loan(ctx: RequestContext, loan) -> Decision:
    decision = exists(loan, "No loan with provided id.")
    if not decision.allowed:
        return decision

    if ctx.is_regular_user:
        if ctx.requester_id is None:
            return deny(Status.NOT_FOUND, "User ID Not Found.")
        if loan.user_id != ctx.requester_id:
            return deny(Status.FORBIDDEN, "You cannot delete another user's loan.")
        if loan.status != LoanStatus.IN_PROGRESS:
            return deny(Status.FORBIDDEN, "You cannot delete loan that is approved or declined.")
    return ALLOW


def decide_update_loan(ctx: RequestContext, loan, status: Optional[LoanStatus]) -> Decision:
    """Role gates of an update; existence and payload validation come first."""
    if ctx.is_regular_user:
        if loan.user_id != ctx.requester_id:
            return deny(Status.FORBIDDEN, "You cannot update another user's loan.")
        if loan.status != LoanStatus.IN_PROGRESS:
            return deny(Status.FORBIDDEN, "You can only update loans that are InProgress.")

    if ctx.is_accountant and status is None:
        return deny(Status.BAD_REQUEST, "Status is required for updating a loan.")
    return ALLOW


# =========================
# USERS
# =========================
def decide_delete_user(ctx: RequestContext, user) -> Decision:
    decision = exists(user, "No user with provided id.")
    if not decision.allowed:
        return decision

    if ctx.is_regular_user:
        if ctx.requester_id is None:
            return deny(Status.NOT_FOUND, "User ID Not Found.")
        if ctx.requester_id != user.id:
            return deny(Status.FORBIDDEN, "You cannot delete another user's account.")
    return ALLOW
