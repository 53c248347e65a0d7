"""
Database configuration and session management
"""

from sqlmodel import SQLModel, Session, create_engine
import structlog

from ashram_connect.core.config import get_settings

logger = structlog.get_logger(__name__)
settings = get_settings()

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    settings.DATABASE_URL.replace("postgresql+asyncpg://", "postgresql://"),
    echo=settings.DEBUG,
    future=True,
    connect_args=connect_args,
)


def init_db():
    """Initialize database tables"""
    # Import models so every table is registered on the metadata
    import ashram_connect.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created")


def get_session():
    """Dependency to get database session"""
    with Session(engine) as session:
        yield session
