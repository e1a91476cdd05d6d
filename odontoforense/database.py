from datetime import timezone

from sqlalchemy import DateTime, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

from odontoforense.core.config import get_settings


def build_engine(database_url: str):
    if database_url.startswith('sqlite'):
        options = {'connect_args': {'check_same_thread': False}}
        if ':memory:' in database_url or database_url == 'sqlite://':
            options['poolclass'] = StaticPool
        return create_engine(database_url, **options)
    return create_engine(database_url, pool_pre_ping=True)


engine = build_engine(get_settings().database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """Timestamp stored as naive UTC and loaded back as an aware UTC datetime.

    Aware values are converted to UTC before binding so the instant survives
    backends (SQLite) that drop the offset. Naive values are taken as UTC.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_schema() -> None:
    # models register themselves on Base.metadata when imported
    from odontoforense.models import case, dental_record, evidence, report, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
