"""CLI interface for sheafy"""

import logging
from pathlib import Path
from typing import List, Optional

import click

from sheafy.application.bundle_service import BundleService, relative_to_root
from sheafy.application.restore_service import RestoreService
from sheafy.domain.errors import ParseError, SheafyError
from sheafy.domain.models.results import BundleResult, RestoreResult
from sheafy.infrastructure.config.config_manager import ConfigManager, write_default_config
from sheafy.infrastructure.filestore.local import LocalFileStore

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)
    for logger_name in logging.Logger.manager.loggerDict:
        logging.getLogger(logger_name).setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def parse_filters(value: Optional[str]) -> Optional[List[str]]:
    """Parse a comma-separated extension list ("rs,.py" -> ["rs", "py"])

    Args:
        value: Raw option value

    Returns:
        Extensions without dots, or None if no option was given
    """
    if value is None:
        return None
    filters = []
    for item in value.split(","):
        ext = item.strip().lstrip(".")
        if ext and ext not in filters:
            filters.append(ext)
    return filters


def _output_bundle_results(result: BundleResult) -> None:
    """Output bundle results to console"""
    for warning in result.collection.warnings:
        click.echo(f"Warning: {warning}", err=True)

    if result.is_empty:
        click.echo("No files found matching the specified filters and ignore rules.")
        return

    for path in result.paths:
        click.echo(f"  Adding: {path}")
    click.echo(
        f"\nSuccessfully created '{result.output_path}' with {len(result.paths)} file(s)."
    )


def _output_restore_results(result: RestoreResult, input_path: Path) -> None:
    """Output restore results to console"""
    if not result.outcomes:
        click.echo(f"Warning: No file blocks found in '{input_path}'. No files restored.")
        return

    for outcome in result.failed:
        click.echo(f"Error: {outcome.error}", err=True)

    click.echo(f"\nRestore complete. {result.count} file(s) restored/overwritten.")
    if result.failed:
        click.echo(f"Failed to restore: {len(result.failed)}", err=True)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to sheafy.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """sheafy - bundle project files into one Markdown document and restore them"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.pass_context
def init(ctx):
    """Create a default sheafy.yml in the current directory."""
    verbose = ctx.obj.get("verbose", False)
    try:
        config_file = write_default_config(Path.cwd())
    except SheafyError as e:
        _die(str(e), verbose=verbose, exc=e)
    click.echo(f"Created {config_file}")


@cli.command()
@click.option(
    "--filters",
    "-f",
    type=str,
    help="Comma-separated extensions to include (e.g. rs,py,txt). Overrides config.",
)
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Output bundle file. Overrides config.")
@click.option("--use-gitignore", is_flag=True, help="Force use of .gitignore rules.")
@click.option("--no-gitignore", is_flag=True, help="Force disabling .gitignore rules.")
@click.pass_context
def bundle(ctx, filters: str, output: Path, use_gitignore: bool, no_gitignore: bool):
    """Bundle project files into a single Markdown file."""
    verbose = ctx.obj.get("verbose", False)

    if use_gitignore and no_gitignore:
        _die("Cannot specify both --use-gitignore and --no-gitignore")
    gitignore_override = True if use_gitignore else (False if no_gitignore else None)

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        settings = config_manager.get_sheafy_config()
        working_dir = config_manager.get_working_dir()
        logger.info(f"Working directory: {working_dir}")

        output_path = output.resolve() if output else working_dir / settings.bundle_name
        excludes = [relative_to_root(output_path, working_dir)]
        if config_manager.config_path:
            excludes.append(relative_to_root(config_manager.config_path, working_dir))

        service = BundleService(settings, LocalFileStore(working_dir))
        result = service.bundle(
            output_path,
            filters=parse_filters(filters),
            use_gitignore=gitignore_override,
            extra_excludes=[path for path in excludes if path],
        )
        _output_bundle_results(result)

    except click.ClickException:
        raise
    except SheafyError as e:
        _die(str(e), verbose=verbose, exc=e)
    except Exception as e:
        _die(f"Fatal error: {e}", verbose=verbose, exc=e)


@cli.command()
@click.argument("input_file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--target",
    "-t",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to restore into (default: working directory).",
)
@click.pass_context
def restore(ctx, input_file: Optional[Path], target: Optional[Path]):
    """Restore files from a Markdown bundle, overwriting existing files.

    INPUT_FILE: Bundle to restore from (default: bundle_name from config)
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        settings = config_manager.get_sheafy_config()
        working_dir = config_manager.get_working_dir()

        input_path = input_file.resolve() if input_file else working_dir / settings.bundle_name
        target_dir = target.resolve() if target else working_dir
        logger.info(f"Restoring into {target_dir}")
        if not target_dir.is_dir():
            target_dir.mkdir(parents=True)

        service = RestoreService(LocalFileStore(target_dir))
        result = service.restore_file(input_path)
        _output_restore_results(result, input_path)

        if result.all_failed:
            _die(f"No files could be restored from '{input_path}'", verbose=verbose)

    except click.ClickException:
        raise
    except ParseError as e:
        _die(f"Malformed bundle: {e}", verbose=verbose, exc=e)
    except SheafyError as e:
        _die(str(e), verbose=verbose, exc=e)
    except Exception as e:
        _die(f"Fatal error: {e}", verbose=verbose, exc=e)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
