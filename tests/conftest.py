"""
Pytest configuration: make sure `import visatrack` works regardless of
where pytest is invoked, and provide an in‑memory database per test.
"""

import sys
from datetime import date
from pathlib import Path

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session  # noqa: E402

from visatrack.cache import NullCache  # noqa: E402
from visatrack.db import create_all, make_engine  # noqa: E402
from visatrack.store import TenantStore  # noqa: E402
from visatrack.tenancy import ensure_company_for_user  # noqa: E402

TODAY = date(2025, 6, 1)


@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture
def store(session):
    company_id, _ = ensure_company_for_user(session, "user-1", "Malta Tech Solutions Ltd")
    return TenantStore(session, company_id)


@pytest.fixture
def client(engine):
    """TestClient wired to the in‑memory engine, a no‑op cache and a fixed day."""
    from api.deps import get_cache, get_session, get_today
    from api.main import app

    def _session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_cache] = lambda: NullCache()
    app.dependency_overrides[get_today] = lambda: TODAY
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def today():
    return TODAY
