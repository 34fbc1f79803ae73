# loanapi/main.py
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from loanapi import config
from loanapi.database import SessionLocal, ensure_accountant, init_db
from loanapi.routers.loans import router as loans_router
from loanapi.routers.users import router as users_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="LoanAPI")


@app.on_event("startup")
def startup_event():
    # hosted Postgres can take a moment to accept connections: retry
    last_err = None
    for _ in range(10):
        try:
            init_db()
            with SessionLocal() as db:
                ensure_accountant(db, config.ADMIN_USER, config.ADMIN_PASS)
            return
        except Exception as e:
            last_err = e
            logger.warning("Database not ready (%s), retrying", e)
            time.sleep(1)

    raise last_err


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # malformed bodies are a BadRequest like any other validation failure
    messages = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())[1:])
        messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return JSONResponse(status_code=400, content={"detail": "; ".join(messages)})


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.head("/")
def healthcheck_head():
    return Response(status_code=200)


app.include_router(users_router)
app.include_router(loans_router)
