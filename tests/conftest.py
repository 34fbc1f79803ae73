import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from loanapi.database import Base, get_db
from loanapi.main import app
from loanapi.models import Currency, Loan, LoanStatus, LoanType, Role, User
from loanapi.security import hash_password
from loanapi.services import LoanService

from helpers import PASSWORD

# bcrypt is slow on purpose: hash once for every seeded user
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def service(db):
    return LoanService(db)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(user_id=None, username=None, role=Role.REGULAR_USER, is_blocked=False):
        user = User(
            id=user_id,
            first_name="name",
            last_name="lastname",
            username=username or f"username{user_id or ''}",
            age=20,
            salary=5000,
            is_blocked=is_blocked,
            password_hash=PASSWORD_HASH,
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_loan(db):
    def _make(user_id, loan_id=None, status=LoanStatus.IN_PROGRESS, loan_type=LoanType.RAPID, amount=5000):
        loan = Loan(
            id=loan_id,
            loan_type=loan_type,
            amount=amount,
            currency=Currency.GEL,
            loan_period=12,
            status=status,
            user_id=user_id,
        )
        db.add(loan)
        db.commit()
        db.refresh(loan)
        return loan

    return _make
