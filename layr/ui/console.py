"""Rich console output for Layr."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from layr import __version__
from layr.planning.markdown import PRIORITY_MARKERS, plan_to_markdown
from layr.planning.models import FileStructureItem, ProjectPlan


class ConsoleUI:
    """Rich-powered console output for plan generation."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def header(self, prompt: str, source: str) -> None:
        if len(prompt) > 100:
            prompt = prompt[:97] + "..."
        self.console.print(
            Panel(
                f"[bold white]{escape(prompt)}[/bold white]\n"
                f"Generator: [cyan]{source}[/cyan]",
                title=f"[bold blue]Layr[/bold blue] v{__version__}",
                border_style="blue",
            )
        )

    def plan_document(self, plan: ProjectPlan) -> None:
        self.console.print(Markdown(plan_to_markdown(plan)))

    def plan_summary(self, plan: ProjectPlan) -> None:
        """Compact view: file tree and next-step table."""
        tree = Tree(f"[bold]{escape(plan.title)}[/bold]")
        _add_nodes(tree, plan.file_structure)
        self.console.print(tree)

        table = Table(title="Next Steps", show_header=True, header_style="bold")
        table.add_column("ID", style="cyan")
        table.add_column("Step")
        table.add_column("Priority", justify="center")
        table.add_column("Estimate", justify="right")
        table.add_column("Depends on", style="dim")

        priority_styles = {"high": "red", "medium": "yellow", "low": "green"}
        for step in plan.next_steps:
            style = priority_styles[step.priority]
            table.add_row(
                escape(step.id),
                escape(step.description),
                f"[{style}]{PRIORITY_MARKERS[step.priority]} {step.priority}[/{style}]",
                escape(step.estimated_time),
                escape(", ".join(step.dependencies)),
            )
        self.console.print(table)

    def saved(self, paths: list[Path]) -> None:
        for path in paths:
            self.console.print(f"  [dim]Saved {path}[/dim]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]Failed to generate plan:[/red] {escape(message)}")

    def offline_notice(self) -> None:
        self.console.print(
            "[yellow]No AI provider configured; using built-in templates.[/yellow] "
            "[dim]Set LAYR_GEMINI_API_KEY, LAYR_OPENAI_API_KEY, LAYR_CLAUDE_API_KEY "
            "or LAYR_PROXY_URL for AI plans.[/dim]"
        )

    def providers_table(self, rows: list[tuple[str, str, list[str], bool]]) -> None:
        table = Table(title="AI Providers", show_header=True, header_style="bold")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Models (default first)")
        table.add_column("Ready", justify="center")

        for provider_type, name, models, ready in rows:
            status = "[green]✓[/green]" if ready else "[red]✗[/red]"
            table.add_row(provider_type, name, "\n".join(models), status)

        self.console.print(table)


def _add_nodes(parent: Tree, items: list[FileStructureItem]) -> None:
    for item in items:
        name = escape(item.name)
        label = f"[bold blue]{name}/[/bold blue]" if item.is_directory else name
        if item.description:
            label += f" [dim]{escape(item.description)}[/dim]"
        branch = parent.add(label)
        if item.children:
            _add_nodes(branch, item.children)
