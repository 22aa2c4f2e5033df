"""Test configuration for API tests."""

import pytest
from fastapi.testclient import TestClient

from api.ingestion import ProjectIngestion
from api.main import app, get_ingestion


@pytest.fixture
def ingestion(sql_store):
    """Ingestion service backed by an in-memory database."""
    return ProjectIngestion(sql_store)


@pytest.fixture
def client(ingestion):
    """TestClient whose routes use the in-memory ingestion service."""
    app.dependency_overrides[get_ingestion] = lambda: ingestion
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
