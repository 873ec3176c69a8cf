"""Command-line interface for AI Form Assist."""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.table import Table

from ai_form_assist.config import settings
from ai_form_assist.core.models import Configuration, FillReport
from ai_form_assist.engine.inference import TargetInferrer
from ai_form_assist.page.static import StaticPageAdapter
from ai_form_assist.service.generation import HttpGenerationService, StaticGenerationService
from ai_form_assist.session import AssistSession, CycleResult
from ai_form_assist.utils.logging import configure_logging

app = typer.Typer(
    name="form-assist",
    help="AI Form Assist - fill web forms with generated content",
    add_completion=False,
)
console = Console()


def _load_json(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise typer.BadParameter(f"Cannot read {path}: {e}")
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{path} must contain a JSON object")
    return data


def _load_config(path: Optional[Path]) -> Optional[Configuration]:
    if path is None:
        return None
    try:
        return Configuration.model_validate(_load_json(path))
    except ValueError as e:
        raise typer.BadParameter(f"Invalid configuration in {path}: {e}")


def _setup_logging(level: Optional[str]) -> None:
    try:
        configure_logging(level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level")


def _print_result(result: CycleResult) -> None:
    if result.report is not None:
        _print_report(result.report)
    if result.signal.success:
        console.print("✅ Fill cycle completed")
    else:
        console.print(f"❌ Fill cycle failed: {result.signal.error}")


def _print_report(report: FillReport) -> None:
    table = Table(title="Fill Report")
    table.add_column("Target", style="cyan")
    table.add_column("Type")
    table.add_column("Outcome", style="green")
    table.add_column("Detail")
    
    for item in report.results:
        table.add_row(item.name, item.type.value, item.outcome.value, item.detail or "")
    
    console.print(table)


@app.command()
def fill(
    url: str = typer.Argument(..., help="Page to fill"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="Caller configuration JSON"),
    endpoint: Optional[str] = typer.Option(None, help="Generation service endpoint"),
    headless: bool = typer.Option(settings.browser_headless, help="Run the browser headless"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level"),
) -> None:
    """Run one fill cycle against a live page."""
    from ai_form_assist.page.browser import BrowserSession
    
    _setup_logging(log_level)
    external_config = _load_config(config_file)
    if not (endpoint or settings.generation_endpoint):
        raise typer.BadParameter("No generation endpoint configured", param_hint="--endpoint")
    
    async def run() -> CycleResult:
        service = HttpGenerationService(endpoint=endpoint)
        try:
            async with BrowserSession(headless=headless) as browser:
                page = await browser.navigate_to(url)
                session = AssistSession(page, service)
                result = await session.run_cycle(external_config)
                # Keep the page open long enough for the badges to show.
                await asyncio.sleep(settings.indicator_duration_ms / 1000)
                return result
        finally:
            await service.close()
    
    result = asyncio.run(run())
    _print_result(result)
    if not result.signal.success:
        raise typer.Exit(code=1)


@app.command("fill-html")
def fill_html(
    html_file: Path = typer.Argument(..., help="HTML document to fill"),
    data_file: Path = typer.Option(..., "--data", help="Generation result JSON"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="Caller configuration JSON"),
    base_url: str = typer.Option("about:blank", help="URL the document is served from"),
    output: Optional[Path] = typer.Option(None, help="Where to write the filled document"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level"),
) -> None:
    """Fill a local HTML document from a fixed generation result."""
    _setup_logging(log_level)
    external_config = _load_config(config_file)
    data = _load_json(data_file)
    page = StaticPageAdapter(html_file.read_text(encoding="utf-8"), url=base_url)
    
    async def run() -> CycleResult:
        session = AssistSession(page, StaticGenerationService(data))
        result = await session.run_cycle(external_config)
        await session.filler.indicator.dismiss_all()
        return result
    
    result = asyncio.run(run())
    _print_result(result)
    
    if output is not None:
        output.write_text(page.to_html(), encoding="utf-8")
        console.print(f"📝 Filled document written to {output}")
    if not result.signal.success:
        raise typer.Exit(code=1)


@app.command()
def targets(
    html_file: Path = typer.Argument(..., help="HTML document to scan"),
) -> None:
    """List the targets inferred from a local HTML document."""
    page = StaticPageAdapter(html_file.read_text(encoding="utf-8"))
    inferred = asyncio.run(TargetInferrer(page).infer_targets())
    
    table = Table(title=f"Inferred Targets ({len(inferred)})")
    table.add_column("Name", style="cyan")
    table.add_column("Selector")
    table.add_column("Type", style="green")
    
    for target in inferred:
        table.add_row(target.name, target.selector, target.type.value)
    
    console.print(table)


@app.command()
def config() -> None:
    """Show current configuration."""
    table = Table(title="AI Form Assist Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    
    # Show non-sensitive settings
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Log Level", settings.log_level)
    table.add_row("Config Element Id", settings.config_element_id)
    table.add_row("Context Attribute", settings.context_attribute)
    table.add_row("Preview Iframe", settings.preview_iframe_selector)
    table.add_row("Preview Path Pattern", settings.preview_path_pattern)
    table.add_row("Preview Max Chars", str(settings.preview_max_chars))
    table.add_row("Generation Endpoint", settings.generation_endpoint or "-")
    table.add_row("Browser Headless", str(settings.browser_headless))
    
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from ai_form_assist import __version__
    console.print(f"AI Form Assist v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
