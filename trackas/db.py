from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from trackas.config import DATABASE_URL, STORE_TIMEOUT_SECONDS


def build_engine(url=DATABASE_URL, timeout=STORE_TIMEOUT_SECONDS, **kwargs):
    # check_same_thread is ONLY valid for SQLite, so we leave it out for Postgres
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": timeout}
        return create_engine(url, connect_args=connect_args, **kwargs)

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_timeout=timeout,
        connect_args={"connect_timeout": int(timeout)},
        **kwargs,
    )


engine = build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
