"""Repository commands."""

import typer

from gitdesk.client import GitDeskClient
from gitdesk.formatting import console, print_table

app = typer.Typer(help="Repositories cloned on the server")


def _get_client(ctx: typer.Context) -> GitDeskClient:
    if ctx.obj and "client" in ctx.obj:
        return ctx.obj["client"]
    return GitDeskClient()


@app.command("list")
def list_repos(ctx: typer.Context):
    """List repositories on the server."""
    client = _get_client(ctx)
    try:
        repos = client.list_repos()
        if not repos:
            console.print("[yellow]No repositories found[/yellow]")
            return
        print_table(["Repository"], [[r] for r in repos], title="Repositories")
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command("add")
def add_repo(
    ctx: typer.Context,
    repo_url: str = typer.Argument(..., help="Repository URL to clone"),
):
    """Clone a repository onto the server."""
    client = _get_client(ctx)
    try:
        result = client.add_repo(repo_url)
        console.print(f"[green]{result.get('message', 'Repository added.')}[/green]")
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
