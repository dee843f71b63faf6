"""
Tests for health server

Tests Flask-based health check endpoints for Kubernetes liveness and readiness
probes, against a real tender database.

Fun fact: The concept of "health checks" in distributed systems was pioneered by Amazon
in the early 2000s when building their highly available retail platform. Today, every
cloud-native system uses similar patterns!
"""

import sqlite3
from pathlib import Path
from typing import Iterator

import pytest
from flask.testing import FlaskClient

from public_tender import __version__, health_server
from public_tender.health_server import app, initialize_health_server
from public_tender.system import TenderSystem
from tests.helpers import create_tender


@pytest.fixture(autouse=True)
def reset_server_state() -> Iterator[None]:
    """Reset module globals so tests don't see each other's database"""
    health_server._db_path = None
    health_server._system = None
    yield
    health_server._db_path = None
    health_server._system = None


@pytest.fixture
def client() -> Iterator[FlaskClient]:
    """Flask test client"""
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


# =============================================================================
# Initialization Tests
# =============================================================================


def test_initialize_accepts_string_path(temp_db: Path) -> None:
    initialize_health_server(str(temp_db))
    assert health_server._db_path == temp_db
    assert health_server._system is None


def test_initialize_stores_system(system: TenderSystem) -> None:
    initialize_health_server(system.sqlite_path, system)
    assert health_server._system is system


# =============================================================================
# Liveness
# =============================================================================


def test_liveness_works_without_initialization(client: FlaskClient) -> None:
    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.get_json() == {"status": "alive", "service": "public-tender"}


# =============================================================================
# Readiness
# =============================================================================


def test_readiness_ready_with_event_count(client: FlaskClient, system: TenderSystem) -> None:
    initialize_health_server(system.sqlite_path)

    response = client.get("/health/ready")

    assert response.status_code == 200
    data = response.get_json()
    assert data["status"] == "ready"
    assert data["database"] == "accessible"
    # authority assignment + one evaluator
    assert data["event_count"] == 2


def test_readiness_not_initialized(client: FlaskClient) -> None:
    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.get_json()["reason"] == "database_path_not_initialized"


def test_readiness_missing_file(client: FlaskClient, tmp_path: Path) -> None:
    initialize_health_server(tmp_path / "gone.db")

    response = client.get("/health/ready")

    assert response.status_code == 503
    data = response.get_json()
    assert data["reason"] == "database_file_not_found"
    assert data["db_path"].endswith("gone.db")


def test_readiness_database_error(client: FlaskClient, tmp_path: Path) -> None:
    db_path = tmp_path / "empty.db"
    sqlite3.connect(str(db_path)).close()  # no events table
    initialize_health_server(db_path)

    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.get_json()["reason"] == "database_operational_error"


# =============================================================================
# Detailed health
# =============================================================================


def test_detailed_health_with_system(client: FlaskClient, system: TenderSystem) -> None:
    create_tender(system)
    initialize_health_server(system.sqlite_path, system)

    response = client.get("/health")

    assert response.status_code == 200
    data = response.get_json()
    assert data["status"] == "healthy"
    assert data["version"] == __version__
    assert data["database"]["event_count"] == 3
    assert data["database"]["stream_count"] == 2
    assert data["tenders"] == {
        "total": 1,
        "by_status": {"OPEN": 1, "CLOSED": 0, "EVALUATED": 0, "FINALIZED": 0},
    }
    assert data["access"] == {"authority_present": True, "evaluator_count": 1}


def test_detailed_health_without_system(client: FlaskClient, system: TenderSystem) -> None:
    initialize_health_server(system.sqlite_path)

    data = client.get("/health").get_json()

    assert data["status"] == "healthy"
    assert "tenders" not in data


def test_detailed_health_degraded_when_not_initialized(client: FlaskClient) -> None:
    response = client.get("/health")

    assert response.status_code == 503
    data = response.get_json()
    assert data["status"] == "degraded"
    assert data["database"] == {"status": "not_initialized"}


def test_detailed_health_reports_renounced_authority(
    client: FlaskClient, system: TenderSystem
) -> None:
    system.renounce_authority("city-hall")
    initialize_health_server(system.sqlite_path, system)

    data = client.get("/health").get_json()

    assert data["access"]["authority_present"] is False
