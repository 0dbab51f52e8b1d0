"""
Command line interface for autolink.

Usage:
  autolink convert [PATHS...]        Link identifier-like words in notes
  autolink convert --dry-run         Report which notes would change
  autolink line "some text" -c 5     Live-convert a single line at a cursor column
  autolink patterns                  Show the active detection patterns
  autolink settings show             Show linker settings
  autolink settings set KEY VALUE    Change a linker setting
  autolink settings reset            Restore default settings
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from tqdm import tqdm

from autolink_core.config import load_config, get_config_value, resolve_path, ConfigStore, LinkerConfig
from autolink_core.constants import DEFAULT_NOTES_DIR, DEFAULT_LOG_LEVEL, DEFAULT_EXCLUDE_PATTERNS, MARKDOWN_EXTENSIONS
from autolink_core.document import FileDocument
from autolink_core.engine import convert_text
from autolink_core.markdown import links_added
from autolink_core.rewriter import Rewriter
from autolink_core.session import LinkerSession
from autolink_core.settings import SETTING_DESCRIPTIONS, format_setting, update_setting, reset_settings
from autolink_core.utils import find_note_files

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)

app = typer.Typer(help="Turn PascalCase, camelCase and snake_case words in markdown notes into wikilinks.")
settings_app = typer.Typer(help="Show and change linker settings.")
app.add_typer(settings_app, name="settings")


def configure_logging(config: dict) -> None:
    """Apply the logging section of the configuration to the root logger."""
    level = get_config_value(config, "logging.level", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    log_file = get_config_value(config, "logging.file", None)
    if log_file:
        try:
            handler = logging.FileHandler(resolve_path(log_file), encoding='utf-8')
        except OSError as e:
            logger.error(f"Unable to open log file {log_file}: {e}")
            return
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
        root.addHandler(handler)


@app.callback()
def callback(ctx: typer.Context,
             config_file: Optional[Path] = typer.Option(None, "--config-file", help="Path to a YAML configuration file.")):
    """Initialize the Typer context with configuration."""
    ctx.obj = {}
    ctx.obj["config"] = load_config(str(config_file) if config_file else None)
    ctx.obj["store"] = ConfigStore(str(config_file) if config_file else None)
    configure_logging(ctx.obj["config"])


@app.command(name="convert")
def convert(
    ctx: typer.Context,
    paths: Optional[List[Path]] = typer.Argument(None, help="Notes or directories to convert (default: notes_dir)"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Report changes without writing files."),
    to_stdout: bool = typer.Option(False, "--stdout", help="Print converted notes instead of writing them."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Increase verbosity of output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Run quietly, suppressing most output."),
) -> None:
    """Convert every eligible word in the given notes to a wikilink."""
    if verbose:
        logging.getLogger("autolink_core").setLevel(logging.DEBUG)
    elif quiet:
        logging.getLogger("autolink_core").setLevel(logging.CRITICAL)

    config = ctx.obj.get("config", {})
    linker_config = ctx.obj["store"].load()

    if paths:
        targets = [str(p) for p in paths]
    else:
        targets = [resolve_path(get_config_value(config, "notes_dir", DEFAULT_NOTES_DIR))]

    note_files = find_note_files(
        targets,
        exclude_patterns=get_config_value(config, "scan.exclude_patterns", DEFAULT_EXCLUDE_PATTERNS),
        extensions=get_config_value(config, "scan.extensions", MARKDOWN_EXTENSIONS),
        quiet=quiet,
    )
    if not note_files:
        typer.echo("No notes found to convert.")
        raise typer.Exit(1)

    session = LinkerSession(linker_config)
    changed_files: List[str] = []
    total_links = 0
    failed = 0

    pbar_iterator = note_files if (quiet or to_stdout) else tqdm(note_files, desc="Converting notes")
    for fp in pbar_iterator:
        try:
            document = FileDocument(fp)
        except OSError as e:
            logger.error(f"Skipping {fp}: {e}")
            failed += 1
            continue

        result = session.convert_current_file(document)
        if to_stdout:
            typer.echo(result.text, nl=False)
        if not result.changed:
            continue

        changed_files.append(fp)
        total_links += links_added(result.original, result.text)
        if dry_run or to_stdout:
            continue
        if not document.save():
            failed += 1

    if to_stdout:
        return

    typer.echo("\n--- Summary ---")
    verb = "Would convert" if dry_run else "Converted"
    typer.echo(f"✅ {verb} {len(changed_files)} of {len(note_files)} notes")
    typer.echo(f"✅ {total_links} links added")
    if dry_run:
        for fp in changed_files:
            typer.echo(f"  - {fp}")
    if failed:
        typer.echo(f"❌ {failed} notes could not be processed")
        raise typer.Exit(1)


@app.command(name="line")
def convert_line(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="The line to convert"),
    cursor: Optional[int] = typer.Option(None, "--cursor", "-c", help="Cursor column; the word at the cursor is left alone"),
) -> None:
    """Convert a single line the way live mode does."""
    if "\n" in text:
        typer.echo("Error: line must not contain a newline")
        raise typer.Exit(1)

    # The cursor is passed through as given. A column past the end of the
    # line suppresses nothing, like a cursor on another line.
    typer.echo(convert_text(text, ctx.obj["store"].load(), cursor))


@app.command(name="patterns")
def list_patterns(ctx: typer.Context) -> None:
    """List the detection patterns that are currently active."""
    linker_config = ctx.obj["store"].load()
    rewriter = Rewriter(linker_config)

    if not rewriter.patterns:
        typer.echo("No patterns enabled.")
    for name, pattern in rewriter.patterns:
        typer.echo(f"{name:<8} {pattern.pattern}")

    if rewriter.custom_pattern_error:
        typer.echo(f"⚠️ Custom pattern {linker_config.custom_pattern!r} ignored: {rewriter.custom_pattern_error}")


@settings_app.command(name="show")
def show_settings(ctx: typer.Context) -> None:
    """Show the current linker settings."""
    linker_config = ctx.obj["store"].load()
    for key in LinkerConfig.model_fields:
        typer.echo(f"{key} = {format_setting(linker_config, key)}")
        typer.echo(f"    {SETTING_DESCRIPTIONS.get(key, '')}")


@settings_app.command(name="set")
def set_setting(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Setting name, e.g. min_length"),
    value: str = typer.Argument(..., help="New value as text"),
) -> None:
    """Change one linker setting."""
    store: ConfigStore = ctx.obj["store"]
    linker_config = store.load()
    try:
        accepted = update_setting(linker_config, key, value)
    except KeyError:
        typer.echo(f"Error: unknown setting '{key}'")
        raise typer.Exit(1)

    if not accepted:
        typer.echo(f"Value {value!r} rejected; {key} is still {format_setting(linker_config, key)}")
        raise typer.Exit(1)

    if not store.save(linker_config):
        typer.echo(f"Error: could not write {store.path}")
        raise typer.Exit(1)
    typer.echo(f"{key} = {format_setting(linker_config, key)}")


@settings_app.command(name="reset")
def reset(ctx: typer.Context) -> None:
    """Restore all linker settings to their defaults."""
    store: ConfigStore = ctx.obj["store"]
    linker_config = store.load()
    reset_settings(linker_config)
    if not store.save(linker_config):
        typer.echo(f"Error: could not write {store.path}")
        raise typer.Exit(1)
    typer.echo("Linker settings restored to defaults.")


def main():
    """Main entry point for the autolink command."""
    app()


if __name__ == "__main__":
    main()
