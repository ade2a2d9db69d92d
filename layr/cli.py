"""CLI entry point using Typer."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from layr import __version__

app = typer.Typer(
    name="layr",
    help="Turn a project description into a structured project plan",
    no_args_is_help=True,
)
console = Console()

MIN_PROMPT_LENGTH = 10


def _settings_or_exit(**overrides):
    from layr.config.settings import load_settings

    try:
        return load_settings(**overrides)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None


@app.command()
def plan(
    prompt: str = typer.Argument(..., help="What do you want to build?"),
    provider: str = typer.Option(None, "--provider", "-p", help="AI provider (gemini|openai|claude|groq)"),
    model: str = typer.Option(None, "--model", "-m", help="Model override"),
    max_tokens: int = typer.Option(None, "--max-tokens", help="Upper bound on reply tokens"),
    offline: bool = typer.Option(False, "--offline", help="Use the built-in templates only"),
    output: Path = typer.Option(None, "--output", "-o", help="Also write the Markdown plan here"),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON"),
    summary: bool = typer.Option(False, "--summary", help="Show a file tree and step table"),
) -> None:
    """Generate a project plan from a free-text description."""
    from layr.errors import LayrError
    from layr.logging.events import EventLog, RunDir
    from layr.planning.markdown import plan_to_markdown
    from layr.planning.planner import Planner
    from layr.ui.console import ConsoleUI

    ui = ConsoleUI(console)

    text = prompt.strip()
    if not text:
        console.print("[red]Please enter a description of what you want to build[/red]")
        raise typer.Exit(1)
    if len(text) < MIN_PROMPT_LENGTH:
        console.print(
            f"[red]Please provide a more detailed description "
            f"(at least {MIN_PROMPT_LENGTH} characters)[/red]"
        )
        raise typer.Exit(1)

    settings = _settings_or_exit(max_tokens=max_tokens)

    if not as_json:
        ui.header(text, "built-in templates" if offline else (provider or "auto"))

    run_dir = RunDir(base=settings.runs_dir)
    with EventLog(run_dir, settings.secrets()) as event_log:
        planner = Planner(settings, event_log=event_log)
        try:
            if offline:
                result = planner.generate_rule_based_plan(text)
            else:
                result = asyncio.run(
                    planner.generate_plan(text, provider=provider, model=model, max_tokens=max_tokens)
                )
        except LayrError as e:
            ui.error(e.message)
            raise typer.Exit(1) from None

    markdown = plan_to_markdown(result)
    saved = run_dir.save_plan(result, markdown)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(markdown, encoding="utf-8")
        saved.append(output)

    if as_json:
        console.print_json(result.model_dump_json(by_alias=True))
        return

    if result.generated_by == "rules" and not offline:
        ui.offline_notice()
    if summary:
        ui.plan_summary(result)
    else:
        ui.plan_document(result)
    ui.saved(saved)


@app.command()
def providers() -> None:
    """List supported AI providers, their models and readiness."""
    from layr.planning.planner import Planner
    from layr.ui.console import ConsoleUI

    planner = Planner(_settings_or_exit())

    async def collect() -> list[tuple[str, str, list[str], bool]]:
        rows = []
        for provider_type in planner.registry.supported_providers():
            p = planner.provider_for(provider_type)
            rows.append((provider_type, p.name, p.get_supported_models(), await p.is_available()))
        return rows

    ConsoleUI(console).providers_table(asyncio.run(collect()))


@app.command("check-key")
def check_key(
    provider: str = typer.Argument(..., help="Provider to check (gemini|openai|claude|groq)"),
    key: str = typer.Option(None, "--key", "-k", help="Key to check instead of the configured one"),
) -> None:
    """Check a provider credential against the live service."""
    from layr.errors import UnsupportedProviderError
    from layr.planning.planner import Planner

    settings = _settings_or_exit()
    try:
        p = Planner(settings).provider_for(provider)
    except UnsupportedProviderError as e:
        console.print(f"[red]{escape(e.message)}[/red]")
        raise typer.Exit(1) from None

    ok = asyncio.run(p.validate_api_key(key or settings.api_key_for(provider) or ""))
    if p.output_format == "markdown":
        what = "Relay"
        detail = "configured" if ok else "not configured"
    else:
        what = "API key"
        detail = "valid" if ok else "invalid or unreachable"

    icon = "[green]✓[/green]" if ok else "[red]✗[/red]"
    console.print(f"  {icon} {p.name}: {what} {detail}")
    if not ok:
        raise typer.Exit(1)


@app.command()
def doctor() -> None:
    """Check the environment for Layr requirements."""
    from layr.llm.base import has_usable_key

    console.print(f"[bold]Layr Doctor[/bold] v{__version__}\n")

    settings = _settings_or_exit()
    checks = []

    v = sys.version_info
    checks.append(("Python ≥ 3.12", v >= (3, 12), f"{v.major}.{v.minor}.{v.micro}", True))

    for provider_type, label in (("gemini", "Gemini"), ("openai", "OpenAI"), ("claude", "Claude")):
        ok = has_usable_key(settings.api_key_for(provider_type))
        checks.append((f"{label} API key (optional)", ok, "set" if ok else "not set", False))
    checks.append(("Relay URL (optional)", bool(settings.proxy_url), settings.proxy_url or "not set", False))

    for name, ok, detail, required in checks:
        icon = "[green]✓[/green]" if ok else ("[red]✗[/red]" if required else "[yellow]–[/yellow]")
        detail_str = f" ({detail})" if detail else ""
        console.print(f"  {icon} {name}{detail_str}")

    default = settings.default_provider()
    console.print()
    if default:
        console.print(f"[green]Plans will be generated with {default}.[/green]")
    else:
        console.print("[yellow]No AI provider configured; plans will use built-in templates.[/yellow]")


def main() -> None:
    app()
