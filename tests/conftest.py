"""Pytest configuration and shared fixtures."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from oncall.config import SchedulerConfig
from oncall.domain.models import Base
from oncall.roster import Person


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def cfg():
    """Default hospital rules."""
    return SchedulerConfig()


@pytest.fixture
def roster():
    """Sixteen people without groups or explicit caps, ids 1..16."""
    return [Person(person_id=i, name=f"Doctor {i:02d}") for i in range(1, 17)]
