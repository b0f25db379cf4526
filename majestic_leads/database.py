import logging
from pathlib import Path

from sqlmodel import Session, SQLModel, create_engine

from majestic_leads.config import settings

logger = logging.getLogger(__name__)

_is_sqlite = settings.database_url.startswith("sqlite")

# Ensure data directory exists for file-backed SQLite
if settings.database_url.startswith("sqlite:///"):
    db_path = settings.database_url.replace("sqlite:///", "")
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)


def init_db() -> None:
    """Create the leads and pipeline_stages tables if they don't exist."""
    import majestic_leads.models  # noqa: F401  registers the tables

    SQLModel.metadata.create_all(engine)
    logger.info("Lead database ready (%s)", engine.url.render_as_string(hide_password=True))


def get_session() -> Session:
    return Session(engine)
