from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..core.config import SETTINGS, Settings
from ..core.errors import (
    MosaicError,
    NoMatchingFilesError,
    PartitionCancelled,
    PartitionIOError,
    PolicyError,
    UnsupportedFileTypeError,
)
from ..core.logging import log, setup_logging

app = typer.Typer(add_completion=False, help="CodeMosaic CLI")


def _settings(ctx: typer.Context) -> Settings:
    if isinstance(ctx.obj, Settings):
        return ctx.obj
    return SETTINGS


def _console(settings: Settings) -> Console:
    return Console(no_color=settings.NO_COLOR, highlight=False)


def _extensions(ext: list[str] | None, settings: Settings) -> list[str]:
    from ..scan import normalize_extensions

    try:
        return normalize_extensions(ext or settings.SCAN_EXTENSIONS)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--ext") from e


def _require_folder(folder: Path) -> None:
    if not folder.is_dir():
        typer.echo(f"❌ Please select a valid source folder: {folder}", err=True)
        raise typer.Exit(1)


def _ensure_dir(directory: Path) -> None:
    if not directory.exists():
        directory.mkdir(parents=True, exist_ok=True)
        log.info("cli.output_dir.created", output_dir=str(directory))


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config_file: str | None = typer.Option(
        None,
        "--config",
        help="Config file (.codemosaic.yaml auto-discovered)",
    ),
    log_format: str | None = typer.Option(
        None, "--log-format", help="Log format: json|plain|auto"
    ),
) -> None:
    """Load configuration and set up logging before any command."""
    try:
        settings = Settings.load_config(config_file)
    except Exception as e:
        typer.echo(f"❌ Config error: {e}", err=True)
        raise typer.Exit(1) from e

    if log_format:
        settings.LOG_FORMAT = log_format
    if settings.LOG_FORMAT not in ("json", "plain", "auto"):
        typer.echo(f"❌ Invalid log format: {settings.LOG_FORMAT}", err=True)
        raise typer.Exit(2)

    setup_logging(settings.LOG_FORMAT)  # type: ignore[arg-type]
    ctx.obj = settings

    # If no command was provided, show help
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@app.command()
def version() -> None:
    from .. import __version__

    typer.echo(__version__)


@app.command()
def split(
    ctx: typer.Context,
    source: Path = typer.Argument(..., help="File to split"),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-o", help="Output folder (default: the source's folder)"
    ),
    base_name: str | None = typer.Option(None, "--base-name", help="Part file name prefix"),
    parts: int | None = typer.Option(None, "--parts", "-n", help="Split into exactly N parts by bytes"),
    max_size_mb: float | None = typer.Option(None, "--max-size-mb", help="Close a part before it exceeds this size"),
    max_chars: int | None = typer.Option(None, "--max-chars", help="Close a part before it exceeds this many characters"),
    combine: bool = typer.Option(False, "--combine", help="Report size and character limits as a combined mode"),
    encoding: str | None = typer.Option(None, "--encoding", help="Text encoding for threshold splits"),
) -> None:
    """
    Split one file into numbered parts.

    Parts are written as {base-name}_part{N}{ext}. With no mode option the
    configured default part count is used.
    """
    from ..split import check_encoding, describe_policy, partition, policy_from_options

    settings = _settings(ctx)

    if not source.is_file():
        log.warning("cli.split.invalid_source", source=str(source))
        typer.echo(f"❌ Please select a valid input file: {source}", err=True)
        raise typer.Exit(1)

    name = base_name if base_name is not None else settings.SPLIT_BASE_NAME
    if not name.strip():
        typer.echo("❌ Base name must not be empty", err=True)
        raise typer.Exit(2)

    try:
        policy = policy_from_options(
            parts=parts,
            max_size_mb=max_size_mb,
            max_chars=max_chars,
            combine=combine,
            default_parts=settings.SPLIT_PART_COUNT,
        )
        text_encoding = check_encoding(encoding or settings.SPLIT_ENCODING)
    except PolicyError as e:
        typer.echo(f"❌ Invalid split options: {e}", err=True)
        raise typer.Exit(2) from e

    out_dir = output_dir if output_dir is not None else source.parent
    _ensure_dir(out_dir)

    log.info(
        "cli.split.start",
        source=str(source),
        output_dir=str(out_dir),
        mode=describe_policy(policy),
    )

    try:
        result = partition(
            source,
            out_dir,
            name,
            policy,
            encoding=text_encoding,
        )
    except (PartitionIOError, PartitionCancelled) as e:
        typer.echo(f"❌ Split failed: {e}", err=True)
        if e.paths:
            typer.echo("Parts written before the failure:", err=True)
            for path in e.paths:
                typer.echo(f"  {path}", err=True)
        raise typer.Exit(1) from e

    typer.echo(f"Created {result.parts_created} part(s).")
    for path in result.paths:
        typer.echo(str(path))
    log.info("cli.split.done", parts_created=result.parts_created)


@app.command()
def combine(
    ctx: typer.Context,
    folder: Path = typer.Argument(..., help="Folder to scan recursively"),
    output_dir: Path = typer.Option(..., "--output-dir", "-o", help="Folder receiving the combined file"),
    output_name: str | None = typer.Option(None, "--output-name", help="Combined file name"),
    ext: list[str] | None = typer.Option(None, "--ext", help="Extension to include (repeatable)"),
    no_metadata: bool = typer.Option(
        False, "--no-metadata", help="Skip the header written before each file"
    ),
) -> None:
    """Combine every matching file under FOLDER into one document."""
    from ..combine import combine_files
    from ..scan import find_files

    settings = _settings(ctx)
    _require_folder(folder)
    extensions = _extensions(ext, settings)

    _ensure_dir(output_dir)
    output_path = output_dir / (output_name or settings.COMBINE_OUTPUT_NAME)
    files = find_files(folder, extensions, exclude=[output_path])

    try:
        result = combine_files(
            files,
            output_path,
            include_metadata=settings.COMBINE_INCLUDE_METADATA and not no_metadata,
            comment_prefix=settings.COMBINE_COMMENT_PREFIX,
        )
    except NoMatchingFilesError as e:
        typer.echo("No matching files found.", err=True)
        raise typer.Exit(1) from e
    except (OSError, UnicodeDecodeError) as e:
        log.error("cli.combine.error", folder=str(folder), error=str(e))
        typer.echo(f"❌ Combine failed: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(
        f"Successfully combined {result.files_combined} files into {result.output_path}."
    )


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    folder: Path = typer.Argument(..., help="Folder to scan recursively"),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-o", help="Folder receiving the manifest (default: FOLDER)"
    ),
    output_name: str | None = typer.Option(None, "--output-name", help="Manifest file name"),
    ext: list[str] | None = typer.Option(None, "--ext", help="Extension to include (repeatable)"),
    print_json: bool = typer.Option(False, "--print", help="Also print the manifest JSON"),
) -> None:
    """List matching files under FOLDER to a JSON manifest."""
    from ..manifest import list_files, write_manifest

    settings = _settings(ctx)
    _require_folder(folder)
    extensions = _extensions(ext, settings)

    out_dir = output_dir if output_dir is not None else folder
    _ensure_dir(out_dir)
    output_path = out_dir / (output_name or settings.LIST_OUTPUT_NAME)

    entries = list_files(folder, extensions, exclude=[output_path])
    try:
        text = write_manifest(entries, output_path)
    except NoMatchingFilesError as e:
        typer.echo("No matching files found.", err=True)
        raise typer.Exit(1) from e
    except OSError as e:
        log.error("cli.list.error", folder=str(folder), output=str(output_path), error=str(e))
        typer.echo(f"❌ Listing failed: {e}", err=True)
        raise typer.Exit(1) from e

    if print_json:
        typer.echo(text)
    typer.echo(f"Listed {len(entries)} files to {output_path}.")


@app.command()
def count(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Text file to analyze"),
    as_json: bool = typer.Option(False, "--json", help="Print statistics as JSON"),
) -> None:
    """Show line, word and character statistics for one file."""
    from ..stats import count_file, general_items

    settings = _settings(ctx)

    if not file.is_file():
        typer.echo(f"❌ Please select a valid input file: {file}", err=True)
        raise typer.Exit(1)

    try:
        stats = count_file(file, supported=settings.COUNT_EXTENSIONS)
    except UnsupportedFileTypeError as e:
        typer.echo(f"❌ {e}. Please select a text-based file.", err=True)
        raise typer.Exit(2) from e
    except (OSError, UnicodeDecodeError) as e:
        log.error("cli.count.error", file=str(file), error=str(e))
        typer.echo(f"❌ Count failed: {e}", err=True)
        raise typer.Exit(1) from e

    if as_json:
        typer.echo(stats.model_dump_json(indent=2))
        return

    console = _console(settings)
    for title, items in (
        ("General Statistics", general_items(stats.general)),
        ("File-Specific Statistics", stats.specific),
    ):
        table = Table(title=title, show_header=True, header_style="bold blue")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")
        table.add_column("Description", style="dim")
        for item in items:
            table.add_row(item.metric, item.value, item.description)
        console.print(table)


def main() -> None:
    try:
        app()
    except MosaicError as e:
        typer.echo(f"❌ {e}", err=True)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
