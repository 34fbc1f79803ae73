# loanapi/database.py
import logging
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from loanapi import config

logger = logging.getLogger(__name__)


# ----------------------------
# Helpers
# ----------------------------
def _is_postgres(url: str) -> bool:
    return url.startswith(("postgres://", "postgresql://", "postgresql+psycopg://"))


def normalize_database_url(url: str) -> str:
    """
    Hosted Postgres providers sometimes hand out:
      - postgres://  (instead of postgresql://)
      - URLs without sslmode

    SQLAlchemy needs the psycopg (v3) driver named explicitly, so the scheme
    is rewritten and sslmode=require is forced when missing.
    SQLite URLs are returned untouched.
    """
    if not url:
        return url

    url = url.strip()
    if not _is_postgres(url):
        return url

    if url.startswith("postgres://"):
        url = "postgresql+psycopg://" + url[len("postgres://"):]
    elif url.startswith("postgresql://"):
        url = "postgresql+psycopg://" + url[len("postgresql://"):]

    parsed = urlparse(url)
    q = dict(parse_qsl(parsed.query, keep_blank_values=True))
    if "sslmode" not in q:
        q["sslmode"] = "require"

    parsed = parsed._replace(query=urlencode(q))
    return urlunparse(parsed)


def resolve_database_url() -> str:
    if config.DATABASE_URL:
        return normalize_database_url(config.DATABASE_URL)
    return f"sqlite:///{config.DB_PATH}"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(url: str, **kwargs):
    if not url.startswith("sqlite"):
        return create_engine(url, **kwargs)

    kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, **kwargs)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


# ----------------------------
# Engine / Session
# ----------------------------
engine = make_engine(resolve_database_url())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency: one session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ----------------------------
# Public API
# ----------------------------
def init_db(bind=None):
    """Creates every table declared on Base (users, loans)."""
    # models register themselves on Base when imported
    from loanapi import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def ensure_accountant(db, username: str, password: str):
    """
    Creates the bootstrap Accountant if it does not exist yet.
    The password is always stored hashed.
    """
    from loanapi.models import Role, User
    from loanapi.security import hash_password

    if not username or not password:
        return None

    existing = db.query(User).filter(User.username == username).first()
    if existing:
        return existing

    user = User(
        first_name="System",
        last_name="Accountant",
        username=username,
        age=18,
        salary=0,
        is_blocked=False,
        password_hash=hash_password(password),
        role=Role.ACCOUNTANT,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Bootstrap accountant %r created", username)
    return user
