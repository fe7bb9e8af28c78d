"""
profstore CLI - Command-line interface.

Commands:
- profstore find --ip 10.0 --limit 20 → List indexed profiles
- profstore show TOKEN → Show a profile and its tree
- profstore purge → Remove all stored profiles
- profstore compact → Drop superseded index rows
"""

from datetime import datetime

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from profstore.core.config import settings, setup_logging
from profstore.core.types import Profile
from profstore.storage.engine import ProfilerStorage

app = typer.Typer(
    name="profstore",
    help="profstore - Request profile storage on key-value caches",
    no_args_is_help=True,
)
console = Console()


def get_storage() -> ProfilerStorage:
    """Create a storage for the configured DSN."""
    return ProfilerStorage.from_dsn(settings.dsn)


def _format_time(timestamp: int) -> str:
    if not timestamp:
        return "-"
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def _add_branch(tree: Tree, profile: Profile) -> None:
    for child in profile.children:
        branch = tree.add(f"[cyan]{child.token}[/cyan] {child.method} {child.url}")
        _add_branch(branch, child)


@app.command()
def find(
    ip: str = typer.Option("", help="Substring of the client IP"),
    url: str = typer.Option("", help="Substring of the request URL"),
    method: str = typer.Option("", help="Substring of the HTTP method"),
    limit: int = typer.Option(10, help="Maximum number of rows"),
):
    """List indexed profiles."""
    setup_logging()

    storage = get_storage()
    summaries = storage.find(ip=ip, url=url, limit=limit, method=method)

    if summaries:
        table = Table(title="Profiles")
        table.add_column("Token", style="cyan")
        table.add_column("IP")
        table.add_column("Method", style="green")
        table.add_column("URL")
        table.add_column("Time", style="dim")
        table.add_column("Parent", style="dim")

        for summary in summaries:
            table.add_row(
                summary.token,
                summary.ip,
                summary.method,
                summary.url,
                _format_time(summary.time),
                summary.parent or "-",
            )

        console.print(table)
    else:
        console.print("[dim]No profiles found[/dim]")


@app.command()
def show(
    token: str = typer.Argument(..., help="Profile token"),
):
    """Show a profile with its parent and children."""
    setup_logging()

    storage = get_storage()
    profile = storage.read(token)

    if profile is None:
        console.print(f"[red]Profile {token} not found[/red]")
        raise typer.Exit(code=1)

    details = [
        f"[bold]{profile.method}[/bold] {profile.url}",
        f"IP: {profile.ip}",
        f"Time: {_format_time(profile.time)}",
        f"Parent: {profile.parent_token or '-'}",
        f"Collectors: {', '.join(sorted(profile.collectors)) or '-'}",
    ]
    console.print(Panel("\n".join(details), title=profile.token))

    if profile.children:
        tree = Tree(f"[cyan]{profile.token}[/cyan]")
        _add_branch(tree, profile)
        console.print(tree)


@app.command()
def purge(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Remove every stored profile and the index."""
    setup_logging()

    if not yes:
        typer.confirm(f"Purge all profiles from {settings.dsn}?", abort=True)

    storage = get_storage()
    if storage.purge():
        console.print("[green]✓ Purged[/green]")
    else:
        console.print("[red]Error: purge failed[/red]")
        raise typer.Exit(code=1)


@app.command()
def compact():
    """Rewrite the index keeping one row per profile."""
    setup_logging()

    storage = get_storage()
    dropped = storage.compact()
    console.print(f"[green]✓ Removed {dropped} superseded index rows[/green]")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
