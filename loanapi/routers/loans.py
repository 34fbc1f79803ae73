# loanapi/routers/loans.py
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from loanapi.auth import get_request_context, require_accountant
from loanapi.database import get_db
from loanapi.deps import ensure_success, get_service
from loanapi.exporter import export_report_to_excel_bytes
from loanapi.policy import RequestContext
from loanapi.schemas import LoanOut, LoanRegister, LoanUpdate, Message
from loanapi.services import LoanService

router = APIRouter(prefix="/api/loan", tags=["Loans"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/loans", response_model=List[LoanOut], summary="List loans")
def get_loans(
    ctx: RequestContext = Depends(get_request_context),
    service: LoanService = Depends(get_service),
):
    return ensure_success(service.get_loans(ctx)).data


# Accountant only: users + loans as an Excel workbook
@router.get("/loans/export", summary="Export users and loans to Excel")
def export_loans(
    ctx: RequestContext = Depends(require_accountant),
    db: Session = Depends(get_db),
):
    content = export_report_to_excel_bytes(db)
    filename = f"loans_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/loans/{loan_id}", response_model=LoanOut, summary="Get loan")
def get_loan(
    loan_id: int,
    ctx: RequestContext = Depends(get_request_context),
    service: LoanService = Depends(get_service),
):
    return ensure_success(service.get_loan_by_id(loan_id, ctx)).data


@router.post("/addLoan", response_model=Message, summary="Request a loan")
def add_loan(
    data: LoanRegister,
    ctx: RequestContext = Depends(get_request_context),
    service: LoanService = Depends(get_service),
):
    result = ensure_success(service.add_loan(data, ctx))
    return {"message": result.message}


@router.delete("/loans/deleteLoan/{loan_id}", response_model=Message, summary="Delete loan")
def delete_loan(
    loan_id: int,
    ctx: RequestContext = Depends(get_request_context),
    service: LoanService = Depends(get_service),
):
    result = ensure_success(service.delete_loan(loan_id, ctx))
    return {"message": result.message}


@router.put("/loans/updateLoan/{loan_id}", response_model=Message, summary="Update loan")
def update_loan(
    loan_id: int,
    data: LoanUpdate,
    ctx: RequestContext = Depends(get_request_context),
    service: LoanService = Depends(get_service),
):
    result = ensure_success(service.update_loan(loan_id, data, ctx))
    return {"message": result.message}
