"""Shared fixtures: an application bound to an in-memory SQLite database."""

import pytest
from fastapi.testclient import TestClient

from agency_finance.config import Settings
from agency_finance.database import init_database, close_database, get_session
from agency_finance.main import create_app


@pytest.fixture
def db_session():
    """A session on a fresh in-memory database, without the web app."""
    init_database("sqlite://")
    session = get_session()
    try:
        yield session
    finally:
        session.close()
        close_database()


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite://")


@pytest.fixture
def client(settings: Settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def income_category(client: TestClient) -> dict:
    response = client.post("/api/categories/", json={"name": "Design", "kind": "income"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def expense_category(client: TestClient) -> dict:
    response = client.post("/api/categories/", json={"name": "Aluguel", "kind": "expense"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def supplier(client: TestClient) -> dict:
    response = client.post(
        "/api/suppliers/",
        json={"name": "Imobiliária Central", "supplier_type": "company", "document": "12345678000199"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def agency_client(client: TestClient) -> dict:
    response = client.post("/api/clients/", json={"name": "Padaria Pão Quente", "email": "contato@paoquente.com"})
    assert response.status_code == 201
    return response.json()
