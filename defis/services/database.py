from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

from ..config import DATABASE_URL, DB_CONNECT_TIMEOUT, DB_READ_TIMEOUT, DB_POOL_TIMEOUT


def build_engine(url: str = DATABASE_URL):
    if url.startswith("sqlite"):
        # In-memory SQLite must share one connection across threads
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_timeout=DB_POOL_TIMEOUT,
        connect_args={
            "connect_timeout": DB_CONNECT_TIMEOUT,
            "read_timeout": DB_READ_TIMEOUT,
            "write_timeout": DB_READ_TIMEOUT,
        },
    )


# SQLAlchemy database engine
engine = build_engine()


def create_db_and_tables():
    # Import table models so they register on the metadata
    from ..models import (  # noqa: F401
        profile, challenge, challenge_vote, challenge_comment,
        sent_challenge, completed_challenge, preferences, reward
    )
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
