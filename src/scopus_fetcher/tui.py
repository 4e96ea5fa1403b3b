"""
Scopus Fetcher TUI elements
"""

from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Prompt
from rich.rule import Rule
from rich.table import Table

from . import settings_manager
from .exceptions import FileWriteError
from .types import LookupReport

console = Console()
err_console = Console(stderr=True)


def phase(msg):
    console.print(Rule(f"[bold cyan]{msg}", style="cyan"))

def note(msg, settings):
    if settings is not None and settings.get("ui_mode", settings_manager.DEFAULT_UI_MODE) in ["research", "debug"]:
        console.print(f"[dim italic]{msg}[/dim italic]")

def done(msg):
    console.print(f"✅ [bold green]{msg}[/bold green]")

def warn(msg):
    console.print(f"⚠️ [yellow]{msg}[/yellow]")

def err(msg):
    err_console.print(f"❌ [bold red]{msg}[/bold red]")


def prompt_source_path() -> str:
    return Prompt.ask("📄 RIS file path", console=console)

def prompt_api_key(default: str = "") -> str:
    if default:
        return Prompt.ask(
            "🔑 Scopus API key", password=True, default=default,
            show_default=False, console=console,
        )
    return Prompt.ask("🔑 Scopus API key", password=True, console=console)


def create_progress() -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TextColumn("[dim]({task.completed} looked up)[/dim]"),
        console=console,
        transient=True,
    )


def save_failed_dois(report: LookupReport, path: Path) -> Path | None:
    try:
        if not report.failed:
            # Drop a list left over from an earlier run.
            path.unlink(missing_ok=True)
            return None
        path.write_text("\n".join(doi for doi, _ in report.failed) + "\n", encoding="utf-8")
    except OSError as e:
        raise FileWriteError(f"Could not update failed DOI list {path}: {e}") from e
    warn(f"{len(report.failed)} DOIs failed, see '{path.name}' beside the input file.")
    return path


def show_summary(report: LookupReport, json_path: Path, xlsx_path: Path):
    tbl = Table(title="[bold]Lookup Summary[/bold]", show_header=False, box=None)
    tbl.add_column("Metric", style="cyan")
    tbl.add_column("Value", style="bold", justify="right")
    tbl.add_row("🔎 DOIs found", str(report.attempted))
    tbl.add_row("✅ Success", str(report.succeeded))
    tbl.add_row("❌ Failed", str(len(report.failed)))
    tbl.add_row("🧾 JSON", str(json_path))
    tbl.add_row("📊 Excel", str(xlsx_path))

    console.print(Rule("[bold green]Lookup Complete[/bold green]"))
    console.print(tbl)
