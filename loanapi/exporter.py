# loanapi/exporter.py
from io import BytesIO

import pandas as pd
from sqlalchemy.orm import Session

from loanapi.models import Loan, User

USER_COLUMNS = ["id", "first_name", "last_name", "username", "age", "salary", "is_blocked", "role"]
LOAN_COLUMNS = ["id", "loan_type", "amount", "currency", "loan_period", "status", "user_id"]


def _value(v):
    # enums go to the sheet by their stored value
    return getattr(v, "value", v)


def _frame(rows, columns) -> pd.DataFrame:
    data = [{c: _value(getattr(r, c)) for c in columns} for r in rows]
    return pd.DataFrame(data, columns=columns)


def export_report_to_excel_bytes(db: Session) -> bytes:
    """Workbook with one sheet of users (no password hashes) and one of loans."""
    users = db.query(User).order_by(User.id.asc()).all()
    loans = db.query(Loan).order_by(Loan.id.asc()).all()

    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for sheet, df in (("users", _frame(users, USER_COLUMNS)), ("loans", _frame(loans, LOAN_COLUMNS))):
            if df.empty:
                # empty sheet, but still created
                pd.DataFrame({"info": [f"No {sheet} registered"]}).to_excel(writer, index=False, sheet_name=sheet)
            else:
                df.to_excel(writer, index=False, sheet_name=sheet)

    output.seek(0)
    return output.read()
