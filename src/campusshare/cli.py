"""Command-line interface for campusshare.

Built with Typer for commands and Rich for output. Each command loads what it
needs from the store files, acts, and saves before exiting.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .chat import ConversationPersistence, ConversationStore
from .config import get_config
from .errors import CampusShareError
from .identity import UserSession
from .log_setup import setup_logging
from .payments import build_gate
from .resources import Resource, ResourceLedger, ResourceStore

# Create the main app
app = typer.Typer(
    name="campusshare",
    help="Share campus resources and chat with their owners.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
resources_app = typer.Typer(help="Add, borrow, return and remove resources.")
app.add_typer(resources_app, name="resources")

chat_app = typer.Typer(help="Chat with resource owners.")
app.add_typer(chat_app, name="chat")

export_app = typer.Typer(help="Export data to JSON.")
app.add_typer(export_app, name="export")

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def format_resource_table(resources: list[Resource], title: str = "Resources") -> Table:
    """Create a rich table for displaying resources."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green", max_width=30)
    table.add_column("Owner")
    table.add_column("Contact")
    table.add_column("Owner Email")
    table.add_column("Status", justify="center")

    for r in resources:
        status = "[green]Available[/green]" if r.available else "[red]Taken[/red]"
        table.add_row(r.id, r.name, r.owner_name, r.owner_contact, r.owner_email or "-", status)

    return table


def open_ledger() -> ResourceLedger:
    """Load the resource ledger from the configured file."""
    config = get_config()
    gate = build_gate(config.payment_success_rate, config.payment_timeout)
    return ResourceLedger.open(
        ResourceStore(config.resources_path),
        gate,
        default_fee=config.borrow_fee,
    )


def open_conversations() -> ConversationStore:
    """Load the conversation store from the configured file."""
    return ConversationStore(ConversationPersistence(get_config().chats_path))


def current_session(ctx: typer.Context) -> UserSession:
    """Session for the --user identity, or exit if there is none."""
    try:
        return UserSession.login(ctx.obj.get("user"), get_config().admins)
    except CampusShareError as e:
        print_error(f"{e}. Pass --user EMAIL.")
        raise typer.Exit(1)


def save_ledger(ledger: ResourceLedger) -> None:
    """Save the ledger or exit with an error."""
    try:
        count = ledger.save()
    except CampusShareError as e:
        print_error(f"Error saving data: {e}")
        raise typer.Exit(1)
    print_info(f"Saved {count} resources.")


@app.callback()
def main_callback(
    ctx: typer.Context,
    user: Optional[str] = typer.Option(
        None, "--user", "-u", envvar="CAMPUSSHARE_USER", help="Verified email of the current user"
    ),
) -> None:
    """Share campus resources and chat with their owners."""
    config = get_config()
    setup_logging(config.log_level)
    for problem in config.validate():
        print_warning(problem)
    ctx.obj = {"user": user}


# ============================================================================
# Resource Commands
# ============================================================================


@resources_app.command("add")
def resources_add(
    name: str = typer.Argument(..., help="Resource name"),
    owner: str = typer.Option(..., "--owner", "-o", help="Owner name"),
    contact: str = typer.Option(..., "--contact", "-c", help="Owner phone number"),
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Owner email (enables chat)"),
) -> None:
    """Add a new resource."""
    ledger = open_ledger()
    try:
        resource = ledger.add(name, owner, contact, email)
    except CampusShareError as e:
        print_error(str(e))
        raise typer.Exit(1)

    save_ledger(ledger)
    print_success(f"Added resource {resource.id}: {resource.name}")


@resources_app.command("list")
def resources_list(
    available: bool = typer.Option(False, "--available", "-a", help="Only available resources"),
) -> None:
    """List resources."""
    ledger = open_ledger()
    resources = ledger.list_resources(available_only=available)

    if not resources:
        print_info("No resources found.")
        return

    console.print(format_resource_table(resources))
    console.print(f"\n[dim]Total: {len(resources)} resources[/dim]")


@resources_app.command("borrow")
def resources_borrow(
    ctx: typer.Context,
    resource_id: str = typer.Argument(..., help="Resource ID"),
    amount: Optional[float] = typer.Option(None, "--amount", help="Fee to pay"),
    note: Optional[str] = typer.Option(None, "--note", help="Payment note"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Borrow a resource (payment required)."""
    session = current_session(ctx)
    ledger = open_ledger()

    resource = ledger.find_by_id(resource_id)
    if resource and resource.available and not yes:
        console.print(
            f'You\'re requesting "{resource.name}" owned by '
            f"{resource.owner_name} ({resource.owner_contact})."
        )
        if not typer.confirm("Payment is required to confirm the borrow. Continue?"):
            print_info("Cancelled.")
            raise typer.Exit(0)

    try:
        resource = ledger.borrow(resource_id, session.email, amount=amount, note=note)
    except CampusShareError as e:
        print_error(str(e))
        raise typer.Exit(1)

    save_ledger(ledger)
    print_success(f"Borrowed (paid): {resource.name} by {session.email}")


@resources_app.command("return")
def resources_return(
    resource_id: str = typer.Argument(..., help="Resource ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Return a borrowed resource."""
    ledger = open_ledger()

    resource = ledger.find_by_id(resource_id)
    if resource and not resource.available and not yes:
        if not typer.confirm(f'Return resource "{resource.name}"?'):
            print_info("Cancelled.")
            raise typer.Exit(0)

    try:
        resource = ledger.give_back(resource_id)
    except CampusShareError as e:
        print_error(str(e))
        raise typer.Exit(1)

    save_ledger(ledger)
    print_success(f"Returned: {resource.name}")


@resources_app.command("remove")
def resources_remove(
    ctx: typer.Context,
    resource_id: str = typer.Argument(..., help="Resource ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a resource (admins only)."""
    session = current_session(ctx)
    try:
        session.require_admin()
    except CampusShareError as e:
        print_error(str(e))
        raise typer.Exit(1)

    ledger = open_ledger()
    resource = ledger.find_by_id(resource_id)
    if resource and not yes:
        if not typer.confirm(f'Delete resource "{resource.name}"?'):
            print_info("Cancelled.")
            raise typer.Exit(0)

    try:
        resource = ledger.remove(resource_id)
    except CampusShareError as e:
        print_error(str(e))
        raise typer.Exit(1)

    save_ledger(ledger)
    print_success(f"Deleted: {resource.name}")


# ============================================================================
# Chat Commands
# ============================================================================


@chat_app.command("send")
def chat_send(
    ctx: typer.Context,
    to: str = typer.Argument(..., help="Recipient email, or a resource ID to reach its owner"),
    text: str = typer.Argument(..., help="Message text"),
) -> None:
    """Send a message."""
    session = current_session(ctx)

    recipient = to
    if "@" not in to:
        resource = open_ledger().find_by_id(to)
        if resource is None:
            print_error(f"Resource not found: {to}")
            raise typer.Exit(1)
        if not resource.owner_email:
            print_error("Owner email not provided for this resource. Chat not available.")
            raise typer.Exit(1)
        recipient = resource.owner_email

    try:
        open_conversations().send(session.email, recipient, text)
    except CampusShareError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Message sent to {recipient.lower()}")


@chat_app.command("show")
def chat_show(
    ctx: typer.Context,
    other: str = typer.Argument(..., help="Other participant's email"),
) -> None:
    """Show the conversation with someone."""
    from datetime import datetime

    session = current_session(ctx)
    messages = open_conversations().get_conversation(session.email, other)

    if not messages:
        print_info("No messages yet.")
        return

    console.print(f"[bold]Chat: {session.email} <-> {other.lower()}[/bold]\n")
    for m in messages:
        who = "You" if m.from_email.lower() == session.email else m.from_email
        when = datetime.fromtimestamp(m.timestamp_millis / 1000).strftime("%d-%b %H:%M")
        console.print(f"[cyan]{who}[/cyan] [dim]\\[{when}][/dim]: {m.text}", highlight=False)


@chat_app.command("list")
def chat_list(ctx: typer.Context) -> None:
    """List everyone you have a conversation with."""
    session = current_session(ctx)
    others = sorted(open_conversations().list_conversations_for(session.email))

    if not others:
        print_info("No conversations yet.")
        return

    console.print("[bold]Conversations[/bold]")
    for email in others:
        console.print(f"  {email}", highlight=False)


# ============================================================================
# Export Commands
# ============================================================================


@export_app.command("json")
def export_json(
    output: Path = typer.Option(
        Path("./campusshare_export.json"), "--output", "-o", help="Output file path"
    ),
    compact: bool = typer.Option(False, "--compact", "-c", help="Compact JSON output"),
) -> None:
    """Export resources and conversations to a JSON file."""
    from .export import JSONExporter

    exporter = JSONExporter(open_ledger(), open_conversations())

    console.print(f"[dim]Exporting to {output}...[/dim]")
    result = exporter.export_all(output, pretty=not compact)

    if result.success:
        print_success(
            f"Exported {result.resources_exported} resources, "
            f"{result.messages_exported} messages"
        )
        console.print(f"  Output: {result.file_path}")
    else:
        print_error(f"Export failed: {result.error}")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"campusshare version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
