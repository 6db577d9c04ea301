"""File commands."""

from pathlib import Path
from typing import Optional

import typer

from gitdesk.client import GitDeskClient
from gitdesk.formatting import build_file_tree, console

app = typer.Typer(help="Browse and edit repository files")


def _get_client(ctx: typer.Context) -> GitDeskClient:
    if ctx.obj and "client" in ctx.obj:
        return ctx.obj["client"]
    return GitDeskClient()


@app.command("tree")
def file_tree(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="Repository name"),
    branch: str = typer.Argument(..., help="Branch name"),
):
    """Show the file tree of a branch."""
    client = _get_client(ctx)
    try:
        files = client.list_files(repo, branch)
        console.print(build_file_tree(f"{repo} ({branch})", files))
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command("cat")
def cat_file(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="Repository name"),
    branch: str = typer.Argument(..., help="Branch name"),
    path: str = typer.Argument(..., help="File path inside the repository"),
):
    """Print a file from a branch."""
    client = _get_client(ctx)
    try:
        content = client.read_file(repo, branch, path)
        console.print(content, markup=False, highlight=False, end="")
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command("save")
def save_file(
    ctx: typer.Context,
    repo: str = typer.Argument(..., help="Repository name"),
    path: str = typer.Argument(..., help="File path inside the repository"),
    source: Optional[Path] = typer.Option(
        None, "--from", "-f", help="Local file to upload (default: stdin)"
    ),
):
    """Write a file on the workspace's current branch.

    Saving does not switch branches: switch first, or publish with the
    branch the edit should end up on.
    """
    client = _get_client(ctx)
    try:
        if source is not None:
            content = source.read_text(encoding="utf-8")
        else:
            content = typer.get_text_stream("stdin").read()
        result = client.save_file(repo, path, content)
        branch = result.get("branch")
        suffix = f" (branch '{branch}')" if branch else ""
        console.print(f"[green]{result.get('message')}{suffix}[/green]")
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
