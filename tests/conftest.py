import pytest
from sqlmodel import Session, SQLModel, create_engine

import majestic_leads.models  # noqa: F401  registers the tables


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database with fresh tables for each test."""
    engine = create_engine("sqlite:///:memory:")
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
