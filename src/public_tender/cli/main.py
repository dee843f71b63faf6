"""
Public Tender CLI

Command-line interface for the procurement tender workflow.
Provides commands for roles, the tender lifecycle, offers and evaluation.

Usage:
    public-tender init --db tenders.db --authority city-hall
    public-tender evaluator add eva --as city-hall
    public-tender tender create --description "Road repair" --max-price 1000 \\
        --deadline-days 7 --weight-price 60 --weight-quality 40 --as city-hall
    public-tender offer submit 1 --price 900 --documentation ipfs://acme --as acme
    public-tender tender close 1 --as city-hall
    public-tender offer evaluate 1 acme --score 85 --as eva
    public-tender tender mark-evaluated 1 --as city-hall
    public-tender tender winner 1 --as city-hall
"""

import json
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from public_tender.kernel.errors import TenderSystemError
from public_tender.kernel.logging import configure_logging, is_production
from public_tender.system import TenderSystem
from public_tender.tender.models import Tender, TenderStatus

# Configure logging to stderr (avoids polluting stdout for JSON output)
configure_logging(
    json_output=is_production(),
    log_level=os.getenv("LOG_LEVEL", "WARNING"),
)

app = typer.Typer(
    name="public-tender",
    help="Public Tender - weighted price/quality procurement workflow",
    add_completion=False,
)

# Sub-apps
authority_app = typer.Typer(help="Authority role commands")
evaluator_app = typer.Typer(help="Evaluator management commands")
tender_app = typer.Typer(help="Tender lifecycle commands")
offer_app = typer.Typer(help="Offer submission and evaluation commands")

app.add_typer(authority_app, name="authority")
app.add_typer(evaluator_app, name="evaluator")
app.add_typer(tender_app, name="tender")
app.add_typer(offer_app, name="offer")

# Global state
DEFAULT_DB = Path(".public_tender.db")

DbOption = Annotated[
    Optional[Path],
    typer.Option("--db", envvar="PUBLIC_TENDER_DB", help="Database path"),
]
CallerOption = Annotated[
    str,
    typer.Option("--as", help="Identity performing the call"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]


def get_system(db_path: Optional[Path] = None) -> TenderSystem:
    """Get TenderSystem instance"""
    db = db_path or DEFAULT_DB
    if not db.exists():
        typer.echo(f"Error: Database not found: {db}", err=True)
        typer.echo(f"Run 'public-tender init --db {db}' to initialize", err=True)
        raise typer.Exit(1)
    return TenderSystem(db)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report domain rejections as 'Error [<kind>]: <reason>' and exit 1"""
    try:
        yield
    except TenderSystemError as e:
        typer.echo(f"Error [{e.kind}]: {e.reason}", err=True)
        raise typer.Exit(1) from e


def _echo_tender(tender: Tender) -> None:
    typer.echo(f"Tender {tender.tender_id}: {tender.description}")
    typer.echo(f"  Status: {tender.status.value}")
    typer.echo(f"  Creator: {tender.creator}")
    typer.echo(f"  Max price: {tender.max_price}")
    typer.echo(f"  Weights: price {tender.weight_price} / quality {tender.weight_quality}")
    typer.echo(f"  Deadline: {tender.deadline.isoformat()}")
    typer.echo(f"  Participants: {tender.participant_count}")
    if tender.winner is not None:
        typer.echo(f"  Winner: {tender.winner}")


# Initialization command


@app.command()
def init(
    db: Annotated[
        Path,
        typer.Option("--db", envvar="PUBLIC_TENDER_DB", help="Database path"),
    ] = DEFAULT_DB,
    authority: Annotated[
        Optional[str],
        typer.Option(
            "--authority",
            envvar="PUBLIC_TENDER_AUTHORITY",
            help="Initial authority identity",
        ),
    ] = None,
) -> None:
    """Initialize a new tender database"""
    if db.exists():
        typer.echo(f"Error: Database already exists: {db}", err=True)
        raise typer.Exit(1)

    with handle_errors():
        system = TenderSystem(db, authority=authority)
    typer.echo(f"✓ Initialized tender database: {db}")
    typer.echo(f"  Authority: {system.current_authority()}")


# Authority commands


@authority_app.command("show")
def authority_show(db: DbOption = None, json_output: JsonOption = False) -> None:
    """Show the current authority and evaluators"""
    system = get_system(db)
    snapshot = system.access_snapshot()

    if json_output:
        typer.echo(json.dumps(snapshot.model_dump(), indent=2))
        return

    typer.echo(f"Authority: {snapshot.authority or '(renounced)'}")
    typer.echo(f"Evaluators: {len(snapshot.evaluators)}")


@authority_app.command("transfer")
def authority_transfer(
    new_authority: Annotated[str, typer.Argument(help="Identity receiving the role")],
    caller: CallerOption,
    db: DbOption = None,
) -> None:
    """Transfer the authority role"""
    system = get_system(db)
    with handle_errors():
        snapshot = system.transfer_authority(caller, new_authority)
    typer.echo(f"✓ Authority transferred to: {snapshot.authority}")


@authority_app.command("renounce")
def authority_renounce(
    caller: CallerOption,
    yes: Annotated[bool, typer.Option("--yes", help="Confirm without prompting")] = False,
    db: DbOption = None,
) -> None:
    """Renounce the authority role (irreversible)"""
    system = get_system(db)
    if not yes:
        typer.confirm("No one will hold the authority role afterwards. Continue?", abort=True)
    with handle_errors():
        system.renounce_authority(caller)
    typer.echo("✓ Authority renounced")


# Evaluator commands


@evaluator_app.command("add")
def evaluator_add(
    address: Annotated[str, typer.Argument(help="Evaluator identity")],
    caller: CallerOption,
    db: DbOption = None,
) -> None:
    """Register an evaluator"""
    system = get_system(db)
    with handle_errors():
        system.add_evaluator(caller, address)
    typer.echo(f"✓ Added evaluator: {address}")


@evaluator_app.command("remove")
def evaluator_remove(
    address: Annotated[str, typer.Argument(help="Evaluator identity")],
    caller: CallerOption,
    db: DbOption = None,
) -> None:
    """Remove an evaluator"""
    system = get_system(db)
    with handle_errors():
        system.remove_evaluator(caller, address)
    typer.echo(f"✓ Removed evaluator: {address}")


@evaluator_app.command("list")
def evaluator_list(db: DbOption = None, json_output: JsonOption = False) -> None:
    """List evaluators"""
    system = get_system(db)
    evaluators = system.list_evaluators()

    if json_output:
        typer.echo(json.dumps(evaluators, indent=2))
        return

    if not evaluators:
        typer.echo("No evaluators")
        return

    typer.echo(f"Evaluators ({len(evaluators)}):")
    for address in evaluators:
        typer.echo(f"  {address}")


# Tender commands


@tender_app.command("create")
def tender_create(
    description: Annotated[str, typer.Option("--description", help="What is being procured")],
    max_price: Annotated[int, typer.Option("--max-price", help="Highest acceptable price")],
    deadline_days: Annotated[int, typer.Option("--deadline-days", help="Offer period in days")],
    weight_price: Annotated[int, typer.Option("--weight-price", help="Price weight (0-100)")],
    weight_quality: Annotated[
        int, typer.Option("--weight-quality", help="Quality weight (0-100)")
    ],
    caller: CallerOption,
    db: DbOption = None,
) -> None:
    """Publish a new tender"""
    system = get_system(db)
    with handle_errors():
        tender = system.create_tender(
            caller, description, max_price, deadline_days, weight_price, weight_quality
        )
    typer.echo(f"✓ Created tender: {tender.tender_id}")
    typer.echo(f"  Deadline: {tender.deadline.isoformat()}")


@tender_app.command("close")
def tender_close(
    tender_id: Annotated[int, typer.Argument(help="Tender ID")],
    caller: CallerOption,
    db: DbOption = None,
) -> None:
    """Close the offer period (after the deadline)"""
    system = get_system(db)
    with handle_errors():
        tender = system.close_offer_period(caller, tender_id)
    typer.echo(f"✓ Closed tender {tender.tender_id} with {tender.participant_count} offer(s)")


@tender_app.command("mark-evaluated")
def tender_mark_evaluated(
    tender_id: Annotated[int, typer.Argument(help="Tender ID")],
    caller: CallerOption,
    db: DbOption = None,
) -> None:
    """Mark a tender as evaluated once every offer is scored"""
    system = get_system(db)
    with handle_errors():
        tender = system.mark_as_evaluated(caller, tender_id)
    typer.echo(f"✓ Tender {tender.tender_id} evaluated")


@tender_app.command("winner")
def tender_winner(
    tender_id: Annotated[int, typer.Argument(help="Tender ID")],
    caller: CallerOption,
    db: DbOption = None,
) -> None:
    """Calculate and commit the winner"""
    system = get_system(db)
    with handle_errors():
        tender = system.calculate_winner(caller, tender_id)
    typer.echo(f"✓ Winner of tender {tender.tender_id}: {tender.winner}")


@tender_app.command("show")
def tender_show(
    tender_id: Annotated[int, typer.Argument(help="Tender ID")],
    db: DbOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show tender details"""
    system = get_system(db)
    with handle_errors():
        tender = system.get_tender(tender_id)

    if json_output:
        typer.echo(json.dumps(tender.model_dump(mode="json"), indent=2))
        return

    _echo_tender(tender)


@tender_app.command("list")
def tender_list(
    status: Annotated[
        Optional[TenderStatus],
        typer.Option("--status", help="Filter by status"),
    ] = None,
    db: DbOption = None,
    json_output: JsonOption = False,
) -> None:
    """List tenders"""
    system = get_system(db)
    tenders = system.list_tenders(status)

    if json_output:
        typer.echo(json.dumps([t.model_dump(mode="json") for t in tenders], indent=2))
        return

    if not tenders:
        typer.echo("No tenders")
        return

    typer.echo(f"Tenders ({len(tenders)}):")
    for tender in tenders:
        typer.echo(
            f"  {tender.tender_id}: {tender.description} [{tender.status.value}] "
            f"{tender.participant_count} offer(s)"
        )


@tender_app.command("history")
def tender_history(
    tender_id: Annotated[int, typer.Argument(help="Tender ID")],
    db: DbOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show the tender's audit trail"""
    system = get_system(db)
    with handle_errors():
        events = system.tender_history(tender_id)

    if json_output:
        typer.echo(json.dumps([e.model_dump(mode="json") for e in events], indent=2))
        return

    typer.echo(f"History of tender {tender_id} ({len(events)} events):")
    for event in events:
        typer.echo(
            f"  v{event.version} {event.occurred_at.isoformat()} "
            f"{event.event_type} by {event.actor_id}"
        )


# Offer commands


@offer_app.command("submit")
def offer_submit(
    tender_id: Annotated[int, typer.Argument(help="Tender ID")],
    price: Annotated[int, typer.Option("--price", help="Offer price")],
    documentation: Annotated[
        str, typer.Option("--documentation", help="Documentation reference")
    ],
    caller: CallerOption,
    db: DbOption = None,
) -> None:
    """Submit an offer as the calling provider"""
    system = get_system(db)
    with handle_errors():
        offer = system.submit_offer(caller, tender_id, price, documentation)
    typer.echo(f"✓ Offer submitted on tender {offer.tender_id} by {offer.provider}")


@offer_app.command("evaluate")
def offer_evaluate(
    tender_id: Annotated[int, typer.Argument(help="Tender ID")],
    provider: Annotated[str, typer.Argument(help="Provider whose offer is scored")],
    score: Annotated[int, typer.Option("--score", help="Quality score (0-100)")],
    caller: CallerOption,
    db: DbOption = None,
) -> None:
    """Record an offer's quality score"""
    system = get_system(db)
    with handle_errors():
        offer = system.evaluate_offer(caller, tender_id, provider, score)
    typer.echo(f"✓ Scored {offer.provider} on tender {offer.tender_id}: {offer.quality_score}")


@offer_app.command("show")
def offer_show(
    tender_id: Annotated[int, typer.Argument(help="Tender ID")],
    provider: Annotated[str, typer.Argument(help="Provider identity")],
    db: DbOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show one offer"""
    system = get_system(db)
    with handle_errors():
        offer = system.get_offer(tender_id, provider)

    if json_output:
        typer.echo(json.dumps(offer.model_dump(mode="json"), indent=2))
        return

    typer.echo(f"Offer on tender {offer.tender_id} by {offer.provider}")
    typer.echo(f"  Price: {offer.price}")
    typer.echo(f"  Documentation: {offer.documentation}")
    if offer.evaluated:
        typer.echo(f"  Quality score: {offer.quality_score} (by {offer.evaluated_by})")
    else:
        typer.echo("  Quality score: pending")


@offer_app.command("list")
def offer_list(
    tender_id: Annotated[int, typer.Argument(help="Tender ID")],
    db: DbOption = None,
    json_output: JsonOption = False,
) -> None:
    """List a tender's offers in submission order"""
    system = get_system(db)
    with handle_errors():
        view = system.get_offers(tender_id)

    if json_output:
        typer.echo(json.dumps(view.model_dump(), indent=2))
        return

    if not view.providers:
        typer.echo(f"No offers on tender {tender_id}")
        return

    typer.echo(f"Offers on tender {tender_id} ({len(view.providers)}):")
    for provider, price, quality, total in zip(
        view.providers, view.prices, view.quality_scores, view.total_scores
    ):
        typer.echo(f"  {provider}: price {price}, quality {quality}, total {total}")


if __name__ == "__main__":
    app()
