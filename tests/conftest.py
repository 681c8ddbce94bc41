# tests/conftest.py
"""
Pytest configuration and fixtures.

Repository-backed fixtures run against both the in-memory repository
and a temporary SQLite database.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.api.dependencies import build_services
from src.infrastructure.db.database import create_db_engine, init_db, make_session_factory
from src.infrastructure.db.memory_repository import InMemoryVerificationRepository
from src.infrastructure.db.repository import SqlVerificationRepository
from src.infrastructure.notifications.memory_notifier import InMemoryNotifier
from tests.factories import ADMIN, TickingClock


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture(params=["memory", "sqlite"])
def repo(request, tmp_path):
    if request.param == "memory":
        yield InMemoryVerificationRepository()
        return
    engine = create_db_engine(f"sqlite:///{tmp_path / 'verification_test.db'}")
    init_db(engine)
    yield SqlVerificationRepository(make_session_factory(engine))
    engine.dispose()


@pytest.fixture
def notifier():
    return InMemoryNotifier()


@pytest.fixture
def services(repo, notifier, clock):
    return build_services(repository=repo, notifier=notifier, clock=clock)


@pytest.fixture
def admin():
    return ADMIN
