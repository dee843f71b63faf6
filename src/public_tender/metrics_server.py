"""
Prometheus metrics server for Public Tender.

Exposes the tender metrics at /metrics. Given a database, it rebuilds the
tender projections and republishes the tenders-by-status gauge on an
interval so a scrape reflects the log even when no command runs here.

Usage:
    python -m public_tender.metrics_server --port 9090 --db tenders.db
"""

import argparse
import time
from pathlib import Path

from public_tender.kernel.logging import configure_logging, get_logger
from public_tender.kernel.metrics import start_metrics_server, update_tender_status_metrics
from public_tender.system import TenderSystem

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Public Tender Metrics Server")
    parser.add_argument(
        "--port",
        type=int,
        default=9090,
        help="Port to listen on (default: 9090)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Tender database to report tender counts from",
    )
    parser.add_argument(
        "--refresh-seconds",
        type=float,
        default=15.0,
        help="How often to reload tender counts (default: 15)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs in JSON format (default: False)",
    )
    return parser


def refresh_tender_counts(db_path: Path) -> dict[str, int]:
    """Rebuild projections from the log and publish tender counts"""
    counts = TenderSystem(db_path).tender_counts_by_status()
    update_tender_status_metrics(counts)
    return counts


def main() -> None:
    """
    Start the Prometheus metrics server.

    The server exposes all metrics at http://0.0.0.0:<port>/metrics
    in Prometheus text format.
    """
    args = build_parser().parse_args()

    configure_logging(json_output=args.json_logs, log_level=args.log_level)

    logger.info(
        "Starting Prometheus metrics server",
        port=args.port,
        endpoint=f"http://0.0.0.0:{args.port}/metrics",
    )
    start_metrics_server(port=args.port)
    logger.info("Metrics server started successfully")

    try:
        while True:
            if args.db is not None and args.db.exists():
                counts = refresh_tender_counts(args.db)
                logger.debug("Tender counts refreshed", **counts)
            time.sleep(args.refresh_seconds)
    except KeyboardInterrupt:
        logger.info("Shutting down metrics server")


if __name__ == "__main__":
    main()
