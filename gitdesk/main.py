"""gitdesk CLI entry point."""

from typing import Optional

import typer

from gitdesk.client import GitDeskClient
from gitdesk.commands import branch, file, repo
from gitdesk.formatting import console, print_status

app = typer.Typer(
    name="gitdesk",
    help="gitdesk CLI - manage git workspaces on a gitdesk server",
    no_args_is_help=True,
)

app.add_typer(repo.app, name="repo")
app.add_typer(branch.app, name="branch")
app.add_typer(file.app, name="file")


@app.callback()
def main(
    ctx: typer.Context,
    url: str = typer.Option(
        "http://localhost:5000", "--url", envvar="GITDESK_URL", help="Server URL"
    ),
):
    """gitdesk CLI"""
    ctx.ensure_object(dict)
    ctx.obj["url"] = url
    ctx.obj["client"] = GitDeskClient(base_url=url)


def _get_client(ctx: typer.Context) -> GitDeskClient:
    """Get the client from context, with fallback."""
    if ctx.obj:
        return ctx.obj.get("client", GitDeskClient())
    return GitDeskClient()


@app.command()
def status(ctx: typer.Context):
    """Show gitdesk server status."""
    client = _get_client(ctx)
    try:
        result = client.get_status()
        print_status("Server", result.get("status", "unknown"))
        print_status("Version", result.get("version", "unknown"))
        print_status("Workspace root", result.get("repo_base_path", "unknown"))
        print_status("Repositories", str(result.get("repos", 0)))
    except Exception as e:
        console.print(f"[red]Error connecting to server: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def publish(
    ctx: typer.Context,
    repo_name: str = typer.Argument(..., help="Repository name"),
    branch_name: str = typer.Argument(..., help="Branch to commit onto and push"),
    message: str = typer.Option(..., "--message", "-m", help="Commit message"),
):
    """Commit pending edits onto BRANCH_NAME, pull, and push it."""
    client = _get_client(ctx)
    try:
        result = client.commit_push(repo_name, branch_name, message)
        console.print(f"[green]{result.get('message')}[/green]")
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default: PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the gitdesk API server."""
    import uvicorn

    from gitdesk_server.config import settings

    try:
        settings.validate()
    except RuntimeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    bind_host = host or settings.host
    bind_port = port or settings.port
    console.print(f"[green]Server running on http://{bind_host}:{bind_port}[/green]")
    uvicorn.run("gitdesk_server.main:app", host=bind_host, port=bind_port, reload=reload)


if __name__ == "__main__":
    app()
