# loanapi/deps.py
from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from loanapi.database import get_db
from loanapi.results import ServiceResult
from loanapi.services import LoanService


def get_service(db: Session = Depends(get_db)) -> LoanService:
    return LoanService(db)


def ensure_success(result: ServiceResult) -> ServiceResult:
    """Turns a failed ServiceResult into the matching HTTP error."""
    if not result.success:
        raise HTTPException(status_code=result.http_status, detail=result.message)
    return result
