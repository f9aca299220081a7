from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from contextlib import contextmanager
from core.config import DatabaseConfigs


_is_sqlite = DatabaseConfigs.DATABASE_URL.startswith("sqlite")

engine = create_engine(
    DatabaseConfigs.DATABASE_URL,
    pool_pre_ping=DatabaseConfigs.POOL_PRE_PING,
    echo=DatabaseConfigs.ECHO,
    # Background tasks touch the session from the threadpool
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
