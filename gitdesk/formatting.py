"""Rich formatting helpers for the gitdesk CLI."""

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

console = Console()


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
):
    """Print a formatted table."""
    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        border_style="dim",
    )
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def print_status(label: str, value: str, color: str = "green"):
    """Print a status line with colored value."""
    console.print(f"[bold]{label}:[/bold] [{color}]{value}[/{color}]")


def build_file_tree(label: str, nodes: list[dict]) -> Tree:
    """Render the server's FileNode list as a Rich tree (folders first)."""
    tree = Tree(f"[bold]{escape(label)}[/bold]")
    _add_nodes(tree, nodes)
    return tree


def _add_nodes(parent: Tree, nodes: list[dict]) -> None:
    ordered = sorted(nodes, key=lambda n: (n.get("type") != "folder", n.get("name", "")))
    for node in ordered:
        if node.get("type") == "folder":
            branch = parent.add(f"[bold blue]{escape(node['name'])}/[/bold blue]")
            _add_nodes(branch, node.get("children", []))
        else:
            parent.add(escape(node.get("name", "?")))
