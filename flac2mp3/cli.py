"""
Command-line interface for flac2mp3.

This module implements the CLI using Click. It parses the options, loads
the configuration, applies the command line overrides and runs one batch.

Usage:
    flac2mp3 [OPTIONS] DIRECTORIES...

    # Convert two albums with the built-in flac | lame commands
    flac2mp3 ~/Music/albumA ~/Music/albumB

    # One worker per CPU, delete the FLAC files afterwards
    flac2mp3 -j 0 --remove ~/Music/albumA

    # Custom commands, replace existing MP3 files
    flac2mp3 -c flac2mp3.yaml --overwrite ~/Music/albumA

    # Keep log files next to the music
    flac2mp3 --log-dir ~/Music/logs ~/Music/albumA

Option Precedence:
    command line > configuration file > built-in defaults

    --remove/--no-remove and --overwrite/--no-overwrite only change the
    setting when given. -j/--num-workers replaces the configured worker
    count; 0 means one worker per CPU. Without -j the configured count is
    used when positive, otherwise files are converted one at a time.

Exit Codes:
    0    All files converted (or nothing to do)
    1    One or more files failed, or the configuration is invalid
    130  Interrupted by the user
"""

import dataclasses
import sys
from pathlib import Path

import click

from flac2mp3 import __version__
from flac2mp3.convert.batch import BatchConverter
from flac2mp3.core.config import Config, load_config
from flac2mp3.core.exceptions import ConfigError
from flac2mp3.core.logger import (
    get_logger,
    log_conversion_failure,
    setup_logging,
    shutdown_logging,
)
from flac2mp3.utils import resolve_worker_count

logger = get_logger(__name__)


@click.command()
@click.argument(
    "directories",
    nargs=-1,
    required=True,
    type=click.Path(path_type=Path),
)
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="YAML configuration file (default: built-in flac | lame commands)"
)
@click.option(
    "--remove",
    is_flag=True,
    help="Delete each source file after it was converted"
)
@click.option(
    "--no-remove",
    is_flag=True,
    help="Keep the source files"
)
@click.option(
    "--overwrite",
    is_flag=True,
    help="Replace destination files that already exist"
)
@click.option(
    "--no-overwrite",
    is_flag=True,
    help="Skip files whose destination already exists"
)
@click.option(
    "-j", "--num-workers",
    type=click.IntRange(min=0),
    default=None,
    metavar="<n>",
    help="Number of parallel workers (0 = one per CPU). "
         "Default: 'workers' from the config file if positive, otherwise 1"
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show debug output"
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<dir>",
    help="Also write log files to this directory"
)
@click.version_option(__version__, prog_name="flac2mp3")
def cli(
    directories: tuple[Path, ...],
    config_path: Path | None,
    remove: bool,
    no_remove: bool,
    overwrite: bool,
    no_overwrite: bool,
    num_workers: int | None,
    verbose: bool,
    log_dir: Path | None
) -> None:
    """
    flac2mp3: Convert the FLAC files in DIRECTORIES to MP3.

    Only files directly inside each directory are converted. Each MP3 is
    written next to its FLAC file, with the same name and copied tags.
    """
    if remove and no_remove:
        raise click.UsageError("--remove and --no-remove are mutually exclusive")
    if overwrite and no_overwrite:
        raise click.UsageError("--overwrite and --no-overwrite are mutually exclusive")

    options = {
        "directories": list(directories),
        "config_path": config_path,
        "remove": True if remove else False if no_remove else None,
        "overwrite": True if overwrite else False if no_overwrite else None,
        "num_workers": num_workers,
        "verbose": verbose,
        "log_dir": log_dir,
    }
    _run_conversion(options)


def _run_conversion(options: dict) -> None:
    """
    Execute one batch based on CLI options.

    Args:
        options: Dictionary with the parsed CLI options. "remove" and
                 "overwrite" are None when not given on the command line.

    Raises:
        SystemExit: Always, with the exit code of the run.
    """
    try:
        setup_logging(options["log_dir"], verbose=options["verbose"])

        config = _build_config(options)
        logger.debug(f"Configuration: {config}")

        batch = BatchConverter(config)
        errors = batch.convert_directories(options["directories"])

        for error in errors:
            log_conversion_failure(logger, error)

        if errors:
            logger.error(f"{len(errors)} error(s) during conversion")
            sys.exit(1)

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        logger.debug(f"Configuration error details: {e.details}")
        sys.exit(1)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    finally:
        shutdown_logging()

    sys.exit(0)


def _build_config(options: dict) -> Config:
    """
    Load the configuration and apply the command line overrides.

    Raises:
        ConfigError: If the configuration file is invalid.
    """
    config = load_config(options["config_path"])

    overrides = {
        "workers": resolve_worker_count(options["num_workers"], config.workers),
    }
    if options["remove"] is not None:
        overrides["remove_after"] = options["remove"]
    if options["overwrite"] is not None:
        overrides["overwrite"] = options["overwrite"]

    return dataclasses.replace(config, **overrides)


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `flac2mp3` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
