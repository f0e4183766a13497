"""Command-line interface for gamelistsync."""

import sys
import logging
import argparse
import asyncio
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

from gamelistsync import __version__
from gamelistsync.config.loader import load_config, ConfigError
from gamelistsync.config.validator import validate_config, ValidationError
from gamelistsync.storage.handles import LocalNode
from gamelistsync.workflow.orchestrator import SyncOrchestrator
from gamelistsync.workflow.progress import ErrorLogger
from gamelistsync.ui.event_bus import EventBus
from gamelistsync.ui.event_log_handler import setup_event_logging
from gamelistsync.ui.headless_logger import HeadlessLogger


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog='gamelistsync',
        description='Sync ES-DE gamelists and downloaded media into a media/image + media/thumbnail layout',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync using the roots from ./config.yaml
  gamelistsync

  # Sync explicit roots
  gamelistsync ~/ES-DE /media/sdcard/roms

  # Sync specific platforms only
  gamelistsync --platforms n3ds gba

  # Drop <image>/<thumbnail> elements already present in the source gamelists
  gamelistsync --replace-existing-media
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        'source',
        nargs='?',
        type=Path,
        help='ES-DE root containing gamelists/ and downloaded_media/. Overrides config.'
    )

    parser.add_argument(
        'destination',
        nargs='?',
        type=Path,
        help='Destination root with one directory per platform. Overrides config.'
    )

    parser.add_argument(
        '--config',
        type=Path,
        metavar='PATH',
        help='Path to config.yaml (default: ./config.yaml if present)'
    )

    parser.add_argument(
        '--platforms',
        nargs='+',
        metavar='PLATFORM',
        help='Platform directory names to sync (e.g., n3ds gba). Overrides config.'
    )

    parser.add_argument(
        '--replace-existing-media',
        action='store_true',
        help='Drop <image>/<thumbnail> elements already present in source gamelists.'
    )

    parser.add_argument(
        '--deterministic-matching',
        action='store_true',
        help='Pick the alphabetically first artwork file when several match a game.'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level. Overrides config.'
    )

    return parser


def _setup_logging(config: dict) -> None:
    """
    Setup logging configuration from config.

    Args:
        config: Configuration dictionary
    """
    logging_config = config.get('logging', {})

    level_str = (logging_config.get('level') or 'INFO').upper()
    level = getattr(logging, level_str, logging.INFO)

    handlers = []

    if logging_config.get('console', True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        handlers.append(console_handler)

    log_file = logging_config.get('file')
    if log_file:
        try:
            log_path = Path(log_file).expanduser()
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_path, encoding='utf-8')
            file_handler.setLevel(level)
            file_handler.setFormatter(
                logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            )
            handlers.append(file_handler)
        except OSError as e:
            print(f"Error: Could not create log file '{log_file}': {e}", file=sys.stderr)
            sys.exit(1)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True  # Override any existing configuration
    )


def _apply_overrides(config: dict, args: argparse.Namespace) -> None:
    """Apply command-line overrides to the loaded configuration."""
    paths = config.setdefault('paths', {})
    if args.source is not None:
        paths['source'] = str(args.source)
    if args.destination is not None:
        paths['destination'] = str(args.destination)

    sync = config.setdefault('sync', {})
    if args.platforms:
        sync['platforms'] = args.platforms
    if args.replace_existing_media:
        sync['replace_existing_media'] = True
    if args.deterministic_matching:
        sync['deterministic_matching'] = True

    if args.log_level:
        config.setdefault('logging', {})['level'] = args.log_level


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for gamelistsync CLI.

    Args:
        argv: Command-line arguments (default: sys.argv)

    Returns:
        Exit code (0 for a completed pass, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        _apply_overrides(config, args)
        validate_config(config)
    except (ConfigError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    _setup_logging(config)

    try:
        return asyncio.run(run_sync(config))
    except KeyboardInterrupt:
        print("\n\nSync interrupted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        logger.debug("Fatal error details:", exc_info=True)
        print(f"\nFatal error: {e}", file=sys.stderr)
        return 1


async def run_sync(config: dict) -> int:
    """
    Run one synchronization pass (async).

    Args:
        config: Loaded and validated configuration

    Returns:
        Exit code
    """
    source_root = LocalNode.from_path(config['paths']['source'])
    dest_root = LocalNode.from_path(config['paths']['destination'])

    event_bus = EventBus()
    headless_logger = HeadlessLogger()
    headless_logger.attach(event_bus)
    event_handler = setup_event_logging(event_bus, level=logging.WARNING)
    bus_task = asyncio.create_task(event_bus.process_events())

    print(f"\ngamelistsync v{__version__}")
    print(f"{'='*60}")
    print(f"Source:      {config['paths']['source']}")
    print(f"Destination: {config['paths']['destination']}")
    platforms = config['sync'].get('platforms')
    if platforms:
        print(f"Platforms:   {', '.join(platforms)}")
    print(f"{'='*60}\n")

    orchestrator = SyncOrchestrator(config, event_bus=event_bus)

    try:
        report = await orchestrator.synchronize(source_root, dest_root)
    finally:
        await event_bus.stop()
        bus_task.cancel()
        try:
            await bus_task
        except asyncio.CancelledError:
            pass
        logging.root.removeHandler(event_handler)

    headless_logger.print_summary(report)

    error_log = config['logging'].get('error_log')
    if error_log:
        error_logger = ErrorLogger()
        error_logger.collect(report)
        if error_logger.has_errors():
            error_logger.write_summary(error_log)
            print(f"Error log written to: {error_log}")

    return 1 if report.aborted else 0


if __name__ == '__main__':
    sys.exit(main())
