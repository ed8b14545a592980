"""
Command-line interface for i18n-auto.

Provides commands for:
- Initialising a project (configuration file and empty catalogs)
- Extracting literal text from one file or a whole directory tree
- Generating target-language catalogs through a translation backend
- Previewing the catalogs that exist

Usage:
    i18n-auto init
    i18n-auto scan src/views/Home.vue
    i18n-auto batch --dir src --exclude legacy
    i18n-auto generate --service google -l en -l ja
    i18n-auto switch en
"""

from __future__ import annotations

import logging
import os
from collections import Counter
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn
from rich.prompt import Prompt

from i18n_auto import __version__
from i18n_auto.catalog import CatalogStore, translation_progress
from i18n_auto.config import ensure_config_exists, env_flag, read_config
from i18n_auto.dispatcher import discover_files, process_batch, process_file
from i18n_auto.errors import I18nAutoError
from i18n_auto.generate import DEFAULT_BATCH_SIZE, DEFAULT_DELAY, generate_languages

app = typer.Typer(
    name="i18n-auto",
    help="i18n-auto: extract hard-coded text into i18n catalogs and translate them",
    add_completion=False,
)
console = Console()

PREVIEW_ROWS = 10

# Answer to the service prompt that writes catalog templates only
SKIP_SERVICE = "skip"


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=False)],
        force=True,
    )


def version_callback(value: bool):
    if value:
        console.print(f"i18n-auto v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose",
        help="Enable debug logging",
    ),
    version: bool = typer.Option(
        False, "--version", "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """i18n-auto: automatic extraction of source-language text."""
    setup_logging(verbose or env_flag("I18N_AUTO_DEBUG"))


def _load():
    config = read_config(Path.cwd())
    if config.debug:
        logging.getLogger("i18n_auto").setLevel(logging.DEBUG)
    return config, CatalogStore.from_config(config)


@app.command()
def init(
    force: bool = typer.Option(
        False, "--force", "-f",
        help="Reset empty catalogs even if they exist",
    ),
):
    """Create the configuration file and the zh/en catalogs."""
    config_path = ensure_config_exists(Path.cwd())
    config, store = _load()
    console.print(f"[green]✓[/] Configuration: {config_path}")

    try:
        if force:
            for language in (store.base_language, "en"):
                store.save({}, language)
                console.print(f"[green]✓[/] Reset {store.path_for(language)}")
        else:
            created = store.ensure_layout(("en",))
            for path in created:
                console.print(f"[green]✓[/] Created {path}")
            if not created:
                console.print("[dim]Catalogs already exist[/]")
    except I18nAutoError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"\nCatalog directory: [cyan]{store.locale_dir}[/]")
    console.print("Next: [cyan]i18n-auto batch --dir src[/]")


@app.command()
def config(
    show_path: bool = typer.Option(
        False, "--path", "-p",
        help="Only print the configuration file path",
    ),
):
    """Open the configuration file in $EDITOR."""
    path = ensure_config_exists(Path.cwd())
    if show_path:
        console.print(str(path))
        return

    editor = os.environ.get("EDITOR") or os.environ.get("VISUAL")
    if not editor:
        console.print(f"[yellow]No $EDITOR set.[/] Edit the file directly: {path}")
        return
    typer.edit(filename=str(path), editor=editor)
    console.print(f"[green]✓[/] Saved {path}")


@app.command()
def scan(
    file: Path = typer.Argument(..., help="Source file to process"),
):
    """Extract text from a single file."""
    config, store = _load()
    result = process_file(file, config, store)

    if not result.success:
        console.print(f"[red]Failed:[/] {file}")
        for error in result.errors:
            console.print(f"  - {escape(error)}")
        raise typer.Exit(1)

    if result.changes:
        console.print(f"[green]✓[/] {file}: {result.changes} change(s)")
        console.print(f"[dim]Catalog: {store.path_for()}[/]")
    else:
        console.print(f"[dim]{file}: nothing to extract[/]")


@app.command()
def batch(
    directory: Path = typer.Option(
        Path("."), "--dir", "-d",
        help="Directory to scan",
    ),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-e",
        help="Skip paths containing this pattern (repeatable)",
    ),
    yes: bool = typer.Option(
        False, "--yes", "-y",
        help="Do not ask for confirmation",
    ),
):
    """Extract text from every supported file under a directory."""
    if not directory.is_dir():
        console.print(f"[red]Error:[/] Directory not found: {directory}")
        raise typer.Exit(1)

    config, store = _load()
    files = discover_files(directory, config, exclude or ())

    if not files:
        console.print(f"[yellow]No supported files found in {directory}[/]")
        return

    by_ext = Counter(f.suffix.lower() for f in files)
    table = Table(title=f"Found {len(files)} file(s)")
    table.add_column("Extension", style="cyan")
    table.add_column("Files", style="green", justify="right")
    for ext, count in sorted(by_ext.items()):
        table.add_row(ext, str(count))
    console.print(table)

    if not yes and not typer.confirm("Process these files?", default=True):
        raise typer.Exit(0)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Processing...", total=len(files))

        def update(path: Path, index: int, total: int):
            progress.update(task, description=escape(path.name), completed=index)

        report = process_batch(files, config, store, progress=update)
        progress.update(task, description="[green]Complete!", completed=len(files))

    summary = report.to_dict()
    table = Table(title="Batch Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    for key, value in summary.items():
        table.add_row(key.replace("_", " ").title(), str(value))
    console.print(table)

    if report.failed:
        console.print(f"\n[red]{len(report.failed)} file(s) failed:[/]")
        for outcome in report.failed:
            console.print(f"  [red]✗[/] {outcome.path}")
            for error in outcome.result.errors:
                console.print(f"      {escape(error)}")

    if not report.processed:
        raise typer.Exit(1)


@app.command()
def generate(
    service: Optional[str] = typer.Option(
        None, "--service", "-s",
        help="Translation backend (google, baidu, deepl, dummy, skip); prompts when omitted",
    ),
    languages: Optional[list[str]] = typer.Option(
        None, "--languages", "-l",
        help="Target language (repeatable, default: en)",
    ),
    no_translate: bool = typer.Option(
        False, "--no-translate",
        help="Only write catalog templates with empty values",
    ),
    batch_size: int = typer.Option(
        DEFAULT_BATCH_SIZE, "--batch-size",
        help="Texts per translation request",
    ),
    delay: float = typer.Option(
        DEFAULT_DELAY, "--delay",
        help="Seconds to wait between batches",
    ),
):
    """Generate target-language catalogs from the base catalog."""
    from i18n_auto.translate.base import available_backends, create_translator, resolve_backend

    config, store = _load()
    targets = languages or ["en"]

    if not store.exists():
        console.print(f"[red]Error:[/] Base catalog not found: {store.path_for()}")
        console.print("Run [cyan]i18n-auto scan[/] or [cyan]i18n-auto batch[/] first")
        raise typer.Exit(1)

    base = store.load()
    if not base:
        console.print("[yellow]Base catalog is empty; nothing to generate.[/]")
        return

    translator = None
    if not no_translate:
        configured = available_backends(config)
        if service is None:
            choices = configured + [SKIP_SERVICE]
            service = Prompt.ask(
                "Select translation service",
                choices=choices,
                default=choices[0],
                console=console,
            )

        if service.lower() != SKIP_SERVICE:
            try:
                name = resolve_backend(service)
                if name != "dummy" and name not in configured:
                    raise ValueError(
                        f"Service '{service}' is not configured. "
                        f"Configured: {', '.join(configured) or 'none'}"
                    )
                translator = create_translator(service, config)
            except (I18nAutoError, ValueError) as e:
                console.print(f"[red]Error:[/] {escape(str(e))}")
                raise typer.Exit(1)

    if translator is None:
        console.print("[dim]No translation service; writing empty values[/]")

    console.print(f"[dim]{len(base)} entries -> {', '.join(targets)}[/]")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Generating...", total=None)

        def update(language: str, done: int, total: int):
            progress.update(task, description=f"Translating to {language}", completed=done, total=total)

        try:
            report = generate_languages(
                targets, config, store, translator,
                batch_size=batch_size, delay=delay, progress=update,
            )
        except I18nAutoError as e:
            console.print(f"[red]Error:[/] {escape(str(e))}")
            raise typer.Exit(1)
        progress.update(task, description="[green]Complete!")

    table = Table(title="Generated Catalogs")
    table.add_column("Language", style="cyan")
    table.add_column("Entries", justify="right")
    table.add_column("Kept", justify="right")
    table.add_column("Translated", style="green", justify="right")
    table.add_column("Fallback", style="yellow", justify="right")
    table.add_column("Empty", style="dim", justify="right")
    for language, stats in report.items():
        table.add_row(
            language, str(stats.total), str(stats.kept),
            str(stats.translated), str(stats.fallback), str(stats.empty),
        )
    console.print(table)


@app.command()
def switch(
    language: Optional[str] = typer.Argument(None, help="Catalog language to preview"),
):
    """Preview a generated catalog and its translation progress."""
    config, store = _load()

    if not store.locale_dir.is_dir():
        console.print(f"[red]Error:[/] Locale directory not found: {store.locale_dir}")
        console.print("Run [cyan]i18n-auto init[/] first")
        raise typer.Exit(1)

    available = store.languages()
    if not available:
        console.print("[red]Error:[/] No catalogs found")
        console.print("Run [cyan]i18n-auto generate[/] first")
        raise typer.Exit(1)

    console.print(f"Available: [cyan]{', '.join(available)}[/]")
    if not language:
        language = typer.prompt("Language", default=available[0])

    if language not in available:
        console.print(f"[red]Error:[/] No catalog for '{language}'")
        raise typer.Exit(1)

    catalog = store.load(language)
    if not catalog:
        console.print(f"[yellow]{language}.json is empty[/]")
        return

    table = Table(title=f"{language}.json ({len(catalog)} entries)")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in list(catalog.items())[:PREVIEW_ROWS]:
        table.add_row(key, escape(value) if value.strip() else "[dim](untranslated)[/]")
    console.print(table)
    if len(catalog) > PREVIEW_ROWS:
        console.print(f"[dim]... {len(catalog) - PREVIEW_ROWS} more[/]")

    done, total = translation_progress(catalog)
    percent = round(done * 100 / total)
    console.print(f"\nProgress: {done}/{total} ({percent}%)")
    if percent < 100:
        console.print(f"Run [cyan]i18n-auto generate -l {language}[/] to fill the gaps")
    console.print(f"[green]✓[/] Using {store.path_for(language)}")


if __name__ == "__main__":
    app()
