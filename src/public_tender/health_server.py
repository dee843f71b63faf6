"""
Health check HTTP server for Kubernetes liveness and readiness probes.

Liveness says the process runs, readiness says the event log answers
queries, and the detailed endpoint adds tender counts by status when a
TenderSystem is attached.
"""

import sqlite3
from pathlib import Path
from typing import Any

from flask import Flask, jsonify

from public_tender import __version__
from public_tender.kernel.logging import get_logger
from public_tender.system import TenderSystem

logger = get_logger(__name__)

app = Flask(__name__)

SERVICE_NAME = "public-tender"

# Global state - will be set by initialize_health_server()
_db_path: Path | None = None
_system: TenderSystem | None = None


def initialize_health_server(db_path: str | Path, system: TenderSystem | None = None) -> None:
    """
    Initialize the health server with database path and optional system.

    Args:
        db_path: Path to SQLite database
        system: Optional TenderSystem for tender counts
    """
    global _db_path, _system
    _db_path = Path(db_path)
    _system = system
    logger.info("Health server initialized", db_path=str(_db_path))


def _query_database(db_path: Path) -> dict[str, Any]:
    conn = sqlite3.connect(str(db_path), timeout=1.0)
    try:
        event_count = conn.execute("SELECT COUNT(*) FROM events").fetchone()[0]
        stream_count = conn.execute(
            "SELECT COUNT(DISTINCT stream_id) FROM events"
        ).fetchone()[0]
        page_count = conn.execute("PRAGMA page_count").fetchone()[0]
        page_size = conn.execute("PRAGMA page_size").fetchone()[0]
    finally:
        conn.close()
    return {
        "event_count": event_count,
        "stream_count": stream_count,
        "size_mb": round((page_count * page_size) / (1024 * 1024), 2),
    }


@app.route("/health/live", methods=["GET"])
def liveness() -> tuple[Any, int]:
    """Liveness probe - the process is running."""
    return jsonify({"status": "alive", "service": SERVICE_NAME}), 200


@app.route("/health/ready", methods=["GET"])
def readiness() -> tuple[Any, int]:
    """
    Readiness probe - checks if the service is ready to accept requests.

    Checks:
    - Database path configured
    - Database file exists
    - Events table answers a query

    Returns:
        200 when ready, 503 otherwise
    """
    if _db_path is None:
        logger.error("Readiness check failed: DB path not initialized")
        return jsonify({"status": "not_ready", "reason": "database_path_not_initialized"}), 503

    if not _db_path.exists():
        logger.error("Readiness check failed: DB file does not exist", db_path=str(_db_path))
        return (
            jsonify(
                {
                    "status": "not_ready",
                    "reason": "database_file_not_found",
                    "db_path": str(_db_path),
                }
            ),
            503,
        )

    try:
        stats = _query_database(_db_path)
    except sqlite3.Error as e:
        logger.error("Readiness check failed: DB error", error=str(e))
        return (
            jsonify(
                {
                    "status": "not_ready",
                    "reason": "database_operational_error",
                    "error": str(e),
                }
            ),
            503,
        )

    logger.debug("Readiness check passed", event_count=stats["event_count"])
    return (
        jsonify({"status": "ready", "database": "accessible", "event_count": stats["event_count"]}),
        200,
    )


@app.route("/health", methods=["GET"])
def detailed_health() -> tuple[Any, int]:
    """
    Detailed health check - database statistics and tender counts.

    Returns:
        200 when healthy, 503 when degraded
    """
    health_data: dict[str, Any] = {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": __version__,
    }

    if _db_path and _db_path.exists():
        try:
            stats = _query_database(_db_path)
        except sqlite3.Error as e:
            logger.error("Database health check failed", error=str(e))
            health_data["database"] = {"status": "unhealthy", "error": str(e)}
            health_data["status"] = "degraded"
        else:
            health_data["database"] = {"status": "healthy", "path": str(_db_path), **stats}
    else:
        health_data["database"] = {"status": "not_initialized"}
        health_data["status"] = "degraded"

    if _system is not None:
        health_data["tenders"] = {
            "total": _system.tender_count(),
            "by_status": _system.tender_counts_by_status(),
        }
        health_data["access"] = {
            "authority_present": _system.current_authority() is not None,
            "evaluator_count": len(_system.list_evaluators()),
        }

    status_code = 200 if health_data["status"] == "healthy" else 503
    return jsonify(health_data), status_code


def run_health_server(port: int = 8080, debug: bool = False) -> None:
    """
    Run the health check server.

    Args:
        port: Port to listen on (default: 8080)
        debug: Enable Flask debug mode (default: False)
    """
    logger.info("Starting health check server", port=port)
    app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
    # For local runs: python -m public_tender.health_server
    initialize_health_server("/tmp/public-tender.db")
    run_health_server(port=8080, debug=True)
