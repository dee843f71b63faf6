"""
Prometheus metrics collection for Public Tender.

Counts what the tender workflow does: events written, calls accepted or
rejected, offers coming in, scores recorded and winners committed.
"""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Gauge, Histogram, start_http_server

from public_tender.kernel.errors import TenderSystemError

# ============================================================================
# Event Store Metrics
# ============================================================================

events_appended_total = Counter(
    "public_tender_events_appended_total",
    "Total number of events appended to the event store",
    ["stream_type", "event_type"],
)

events_loaded_total = Counter(
    "public_tender_events_loaded_total",
    "Total number of events loaded from the event store",
    ["stream_type"],
)

# ============================================================================
# Command Processing Metrics
# ============================================================================

command_duration_seconds = Histogram(
    "public_tender_command_duration_seconds",
    "Duration of command processing in seconds",
    ["command_type"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

commands_processed_total = Counter(
    "public_tender_commands_processed_total",
    "Total number of commands processed",
    ["command_type", "status"],  # status: success, rejected, failure
)

# ============================================================================
# Tender Workflow Metrics
# ============================================================================

tenders_by_status_total = Gauge(
    "public_tender_tenders_by_status_total",
    "Number of tenders by status",
    ["status"],
)

offers_submitted_total = Counter(
    "public_tender_offers_submitted_total",
    "Total number of offers accepted",
)

offers_evaluated_total = Counter(
    "public_tender_offers_evaluated_total",
    "Total number of offers given a quality score",
)

winners_selected_total = Counter(
    "public_tender_winners_selected_total",
    "Total number of tenders finalized with a winner",
)

# ============================================================================
# Helper Functions
# ============================================================================

P = ParamSpec("P")
R = TypeVar("R")


def track_command_duration(command_type: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator to track command processing duration and outcome.

    Domain rejections count as "rejected", anything else raised as "failure".

    Args:
        command_type: Type of command being processed
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            status = "success"
            try:
                return func(*args, **kwargs)
            except TenderSystemError:
                status = "rejected"
                raise
            except Exception:
                status = "failure"
                raise
            finally:
                duration = time.perf_counter() - start
                command_duration_seconds.labels(command_type=command_type).observe(duration)
                commands_processed_total.labels(
                    command_type=command_type, status=status
                ).inc()

        return wrapper

    return decorator


def update_tender_status_metrics(counts: dict[str, int]) -> None:
    """
    Publish the current number of tenders per status.

    Args:
        counts: Mapping of status value to tender count
    """
    for status, count in counts.items():
        tenders_by_status_total.labels(status=status).set(count)


def start_metrics_server(port: int = 9090) -> None:
    """
    Start Prometheus metrics HTTP server.

    Args:
        port: Port to listen on (default: 9090)
    """
    start_http_server(port)
