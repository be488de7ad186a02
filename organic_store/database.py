# organic_store/database.py
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from organic_store.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Engine configuration
#
# Postgres (hosted):
#   - sslmode=require    : enforce SSL when running in the cloud
#   - pool_size=5        : small pool, hosted poolers limit clients
#   - pool_pre_ping=True : validate connections before using them
#
# SQLite (local dev / tests):
#   - check_same_thread=False so FastAPI's threadpool can share it
# ---------------------------------------------------------


def build_engine(db_url: str) -> Engine:
    if db_url.startswith("sqlite"):
        return create_engine(
            db_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    # Append sslmode=require if it is not already present
    if db_url.startswith("postgresql") and "sslmode=" not in db_url:
        if "?" in db_url:
            db_url = db_url + "&sslmode=require"
        else:
            db_url = db_url + "?sslmode=require"

    return create_engine(
        db_url,
        echo=False,  # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
    )


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
