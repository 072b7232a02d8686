"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import click

from monomegrid import __version__
from monomegrid.exceptions import ConfigurationError
from monomegrid.models import GridConfig
from monomegrid.models.config import CONFIG_DIR

from .commands import demo, list_devices, marquee, print_text
from .commands.common import report_error

logger = logging.getLogger(__name__)


def default_log_path() -> Path:
    return CONFIG_DIR / "logs" / "monomegrid.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path]) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, log everything at DEBUG level
        log_file: Custom log file path (optional)

    Returns:
        Path of the log file
    """
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    log_path = log_file or default_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Create rotating file handler (keeps last 5 files, max 10MB each)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")
    return log_path


@click.group()
@click.pass_context
@click.version_option(version=__version__, prog_name="monomegrid")
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug logging'
)
@click.option(
    '--log-file',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Custom log file path (default: ~/.monomegrid/logs/monomegrid.log)'
)
@click.option(
    '--config',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file (default: ~/.monomegrid/config.json)'
)
def cli(
    ctx,
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    config_path: Optional[Path],
):
    """
    monomegrid - drive monome grids attached over USB.

    \b
    Examples:
      # Show the grids that are plugged in
      monomegrid list

      # Scroll a text over all grids
      monomegrid marquee "hello world"

      # Light pads while they are pressed (Ctrl+C to stop)
      monomegrid -v demo
    """
    log_path = setup_logging(verbose, debug, log_file)

    try:
        config = GridConfig.load_or_default(config_path)
    except ConfigurationError as e:
        logger.error(f"Could not load configuration: {e.technical_message}")
        report_error(e, log_path)
        sys.exit(1)

    ctx.obj = {"config": config, "log_path": log_path}


cli.add_command(list_devices)
cli.add_command(marquee)
cli.add_command(print_text)
cli.add_command(demo)

if __name__ == "__main__":
    cli()
