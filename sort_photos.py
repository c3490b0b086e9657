#!/usr/bin/env python3
"""
PhotoSorter CLI

Moves photos and videos from a source folder into year-month folders in a
destination folder, deleting anything the destination already holds.
"""

import sys
import logging
import click
from pathlib import Path
from colorama import init, Fore, Style

# Add the photo_sorter package to path
sys.path.insert(0, str(Path(__file__).parent))

from photo_sorter import (
    __version__,
    Config,
    PhotoSorter,
    SortReporter,
)

# Initialize colorama for cross-platform colored output
init()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = 'INFO', log_dir: Path = None):
    """Set up logging configuration."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Create formatter
    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    # Progress messages are echoed by the CLI, so the console only gets
    # warnings unless debugging
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(numeric_level if numeric_level <= logging.DEBUG else logging.WARNING)

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(console_handler)

    # File handler if log_dir provided
    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / 'photo_sorter.log')
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Reduce noise from libraries
    logging.getLogger('exifread').setLevel(logging.WARNING)
    logging.getLogger('hachoir').setLevel(logging.WARNING)


def print_header(title: str):
    """Print a formatted header."""
    click.echo(f"\n{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}")
    click.echo(f"{Fore.CYAN}{title.center(60)}{Style.RESET_ALL}")
    click.echo(f"{Fore.CYAN}{'=' * 60}{Style.RESET_ALL}\n")
    sys.stdout.flush()

def print_success(message: str):
    """Print success message."""
    click.echo(f"{Fore.GREEN}OK: {message}{Style.RESET_ALL}")
    sys.stdout.flush()

def print_warning(message: str):
    """Print warning message."""
    click.echo(f"{Fore.YELLOW}WARN: {message}{Style.RESET_ALL}")
    sys.stdout.flush()

def print_error(message: str):
    """Print error message."""
    click.echo(f"{Fore.RED}ERROR: {message}{Style.RESET_ALL}")
    sys.stdout.flush()

def print_info(message: str):
    """Print info message."""
    click.echo(f"{Fore.BLUE}INFO: {message}{Style.RESET_ALL}")
    sys.stdout.flush()


EXISTING_DIR = click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path)


@click.command()
@click.argument('source', type=EXISTING_DIR)
@click.argument('destination', type=EXISTING_DIR)
@click.option('--config', '-c', help='Path to configuration file')
@click.option('--log-level', '-l', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level (overrides config)')
@click.option('--log-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Also write a log file to this directory')
@click.option('--progress', is_flag=True, help='Show a progress bar')
@click.option('--report', '-r', type=click.Path(dir_okay=False, path_type=Path),
              help='Save a JSON report to this file')
def cli(source, destination, config, log_level, log_dir, progress, report):
    """PhotoSorter - move photos and videos into year-month folders.

    SOURCE and DESTINATION must be existing folders. Files are moved out of
    SOURCE; anything already present in DESTINATION is deleted from SOURCE.
    """
    print_header(f"PhotoSorter {__version__}")

    try:
        config_obj = Config(config)
    except Exception as e:
        print_error(f"Failed to load configuration: {e}")
        sys.exit(1)

    setup_logging(log_level or config_obj.get_log_level(), log_dir)

    errors = config_obj.validate_config()
    if errors:
        print_error("Configuration validation failed:")
        for error in errors:
            click.echo(f"  - {error}")
        sys.exit(1)

    try:
        sorter = PhotoSorter(
            source,
            destination,
            config=config_obj,
            log_callback=click.echo,
            show_progress=progress,
        )
        stats = sorter.sort()

        reporter = SortReporter(source, destination)
        if report:
            report_file = reporter.save_report(stats, report)
            print_success(f"Report saved: {report_file}")

        click.echo("\n" + reporter.generate_summary_report(stats))

        if stats.errors:
            print_warning(f"Sort completed with {len(stats.errors)} errors")
        else:
            print_success("Sort complete!")
        sys.stdout.flush()

    except Exception as e:
        logging.getLogger(__name__).exception("Sort failed")
        print_error(f"{e}")
        sys.exit(1)


if __name__ == '__main__':
    cli()
