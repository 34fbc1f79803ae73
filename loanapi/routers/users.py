# loanapi/routers/users.py
from typing import List

from fastapi import APIRouter, Depends, Query

from loanapi.auth import get_request_context, require_accountant
from loanapi.deps import ensure_success, get_service
from loanapi.policy import RequestContext
from loanapi.schemas import Message, Token, UserLogin, UserOut, UserRegister
from loanapi.services import LoanService

router = APIRouter(prefix="/api/loan", tags=["Users"])


# =========================
# ANONYMOUS
# =========================
@router.post("/login", response_model=Token, summary="Log in and get a bearer token")
def login(data: UserLogin, service: LoanService = Depends(get_service)):
    result = ensure_success(service.login(data.username, data.password))
    return {"token": result.data}


@router.post("/addUser", response_model=Message, summary="Register a user")
def add_user(data: UserRegister, service: LoanService = Depends(get_service)):
    result = ensure_success(service.add_user(data))
    return {"message": result.message}


# =========================
# AUTHENTICATED
# =========================
@router.get("/users", response_model=List[UserOut], summary="List users")
def get_users(
    ctx: RequestContext = Depends(require_accountant),
    service: LoanService = Depends(get_service),
):
    return ensure_success(service.get_users()).data


@router.get("/users/getCurrentUserInfo", response_model=UserOut, summary="Current user profile")
def get_current_user_info(
    ctx: RequestContext = Depends(get_request_context),
    service: LoanService = Depends(get_service),
):
    return ensure_success(service.get_current_user(ctx)).data


@router.get("/users/{user_id}", response_model=UserOut, summary="Get user")
def get_user(
    user_id: int,
    ctx: RequestContext = Depends(require_accountant),
    service: LoanService = Depends(get_service),
):
    return ensure_success(service.get_user(user_id)).data


@router.delete("/users/deleteUser/{user_id}", response_model=Message, summary="Delete user")
def delete_user(
    user_id: int,
    ctx: RequestContext = Depends(get_request_context),
    service: LoanService = Depends(get_service),
):
    result = ensure_success(service.delete_user(user_id, ctx))
    return {"message": result.message}


@router.put("/users/changeStatus/{user_id}", response_model=Message, summary="Block or unblock user")
def change_user_status(
    user_id: int,
    is_blocked: bool = Query(..., alias="isBlocked"),
    ctx: RequestContext = Depends(require_accountant),
    service: LoanService = Depends(get_service),
):
    result = ensure_success(service.change_user_status(user_id, is_blocked))
    return {"message": result.message}
