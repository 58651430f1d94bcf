from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from jobhub.config import DB_URL


class Base(DeclarativeBase):
    pass


def make_engine(db_url: str = DB_URL):
    return create_engine(db_url, echo=False, pool_pre_ping=True)


def make_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def init_db(engine) -> None:
    from jobhub.models import job  # noqa: F401

    Base.metadata.create_all(engine)
