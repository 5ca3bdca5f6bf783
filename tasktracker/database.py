import logging

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base
from tasktracker.config import DATABASE_URL

logger = logging.getLogger(__name__)

# Only apply sqlite-specific connect_args when using sqlite
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Columns added after the first release: (table, column, DDL type)
_ADDITIVE_COLUMNS = [
    ("tasks", "completed_at", "TIMESTAMP"),
]


def _ensure_schema(bind=None):
    """Add columns missing from tables created by an older release (no Alembic)."""
    bind = bind if bind is not None else engine
    insp = inspect(bind)
    for table, column, ddl_type in _ADDITIVE_COLUMNS:
        try:
            cols = [c["name"] for c in insp.get_columns(table)]
            if column not in cols:
                with bind.begin() as conn:
                    conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl_type}"))
                logger.info("added column %s.%s", table, column)
        except SQLAlchemyError:
            # best-effort; startup continues with the old schema
            logger.exception("could not add column %s.%s", table, column)


def init_db():
    # models must be registered on Base before create_all
    from tasktracker.models import task, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
    _ensure_schema()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
