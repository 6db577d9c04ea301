"""Branch commands."""

import typer

from gitdesk.client import GitDeskClient
from gitdesk.formatting import console

app = typer.Typer(help="Branches of a repository")


def _get_client(ctx: typer.Context) -> GitDeskClient:
    if ctx.obj and "client" in ctx.obj:
        return ctx.obj["client"]
    return GitDeskClient()


@app.command("list")
def list_branches(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="Repository name"),
):
    """List local and remote branches."""
    client = _get_client(ctx)
    try:
        branches = client.list_branches(repo)
        if not branches:
            console.print("[yellow]No branches found[/yellow]")
            return
        for name in branches:
            console.print(f"  {name}")
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command("create")
def create_branch(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="Repository name"),
    branch: str = typer.Argument(..., help="New branch name"),
):
    """Create a branch at the current commit and push it."""
    client = _get_client(ctx)
    try:
        result = client.create_branch(repo, branch)
        console.print(f"[green]{result.get('message')}[/green]")
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command("switch")
def switch_branch(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="Repository name"),
    branch: str = typer.Argument(..., help="Branch to check out"),
):
    """Check out a branch in the server's workspace."""
    client = _get_client(ctx)
    try:
        result = client.switch_branch(repo, branch)
        console.print(f"[green]{result.get('message')}[/green]")
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
