import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from config.settings import DATABASE_URL, DATA_DIR

logger = logging.getLogger(__name__)


def make_engine(url: str = DATABASE_URL):
    """Create engine; in-memory SQLite shares one connection across sessions"""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url)


engine = make_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Yield a session and close it afterwards"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create tables"""
    from . import models  # noqa: F401 registers tables on Base
    if bind is None and DATABASE_URL.startswith("sqlite:///") and ":memory:" not in DATABASE_URL:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ready")
