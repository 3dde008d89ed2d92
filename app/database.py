from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from app.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    # SQLite-specific settings
    connect_args={"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {},
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """
    FastAPI dependency for database sessions.

    Yields one session per request; every team-management operation runs
    as a unit of work on it and the session is closed after the response.

    Usage:
        @router.post("")
        async def manage_team(
            body: TeamActionRequest,
            caller: CallerIdentity = Depends(get_current_caller),
            db: Session = Depends(get_db),
        ):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
