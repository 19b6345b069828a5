import pytest
from fastapi.testclient import TestClient

from portfolio_rag.web.app import create_app


@pytest.fixture
def client(engine):
    """Test client over an app wired to the in-memory engine."""
    with TestClient(create_app(engine=engine)) as test_client:
        yield test_client
