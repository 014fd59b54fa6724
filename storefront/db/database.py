"""Database connection and session management"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import logging

logger = logging.getLogger(__name__)

Base = declarative_base()

engine = None
SessionLocal = None


def init_database(database_url: str):
    """Initialize database connection"""
    global engine, SessionLocal
    
    logger.info("Initializing database connection")
    
    engine_options = {"pool_pre_ping": True, "echo": False}
    if not database_url.startswith("sqlite"):
        engine_options.update(pool_size=5, max_overflow=10)
    
    engine = create_engine(database_url, **engine_options)
    
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    logger.info("Database connection initialized")
    
    return engine


def create_tables():
    """Create all tables"""
    # Register every model on Base.metadata
    from storefront import models  # noqa: F401
    
    logger.info("Creating database tables")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
