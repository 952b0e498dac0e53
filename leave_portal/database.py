from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from leave_portal.core.config import settings

# Local session state only; leave data lives in the external API
DATABASE_URL = settings.state_database_url

if DATABASE_URL.startswith("postgresql"):
    engine = create_engine(DATABASE_URL)
else:
    engine = create_engine(
        DATABASE_URL, connect_args={"check_same_thread": False}
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db():
    """
    Registers the state models and creates the schema.
    Called once during the application startup lifespan.
    """
    from leave_portal.models import portal_state  # noqa: F401
    Base.metadata.create_all(bind=engine)
