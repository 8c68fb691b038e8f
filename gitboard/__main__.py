"""Main entry point for gitboard CLI."""

from dotenv import load_dotenv
load_dotenv()

import sys
import argparse
import logging
from typing import List, Optional

from .config import Config
from .core.aggregator import ResultAggregator
from .core.credentials import credentials_from_config
from .core.errors import OpenError, RegistryError
from .core.logger import setup_logging
from .core.registry import RepoRegistry
from .core.repo_manager import RepoManager, open_repositories
from .report import print_diagnostics, print_distribution, print_report
from .utils.progress import ProgressTracker


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='gitboard',
        description='Show the sync status of many local git repositories',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Status symbols:
  +  staged changes      *  unstaged changes      _  untracked files

Distance to upstream:
  == in sync   >> ahead   << behind   <> diverged

Examples:
  # Register repositories
  gitboard add ~/src/website ~/dotfiles

  # Show the dashboard without touching the network
  gitboard --no-fetch

  # Jump into a registered repository
  cd "$(gitboard path website)"
        """
    )

    # Global configuration
    parser.add_argument(
        '-c', '--config',
        metavar='PATH',
        help='Registry file (overrides GITBOARD_CONFIG)'
    )
    parser.add_argument(
        '-F', '--no-fetch',
        action='store_true',
        help='Do not fetch from remotes before reporting'
    )
    parser.add_argument(
        '-w', '--workers',
        type=int,
        metavar='N',
        help='Number of parallel workers (default: 4)'
    )
    parser.add_argument(
        '--fetch-timeout',
        type=float,
        metavar='SECONDS',
        help='Abandon a fetch after this many seconds (default: 30)'
    )
    parser.add_argument(
        '--ssh-key',
        metavar='PATH',
        help='Private key used for fetching (default: ssh-agent / git config)'
    )
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Also write a debug log to this file'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase log output (repeat for debug)'
    )
    parser.add_argument(
        '--summary',
        action='store_true',
        help='Print a status distribution after the table'
    )

    # Subcommands (registry maintenance)
    subparsers = parser.add_subparsers(
        dest='command',
        help='Registry command to run before the report',
        required=False
    )

    add_parser = subparsers.add_parser('add', help='Add new repositories')
    add_parser.add_argument('paths', nargs='+', metavar='PATH')

    remove_parser = subparsers.add_parser('remove', help='Remove repositories')
    remove_parser.add_argument('names', nargs='+', metavar='NAME')

    rename_parser = subparsers.add_parser('rename', help='Rename a repository')
    rename_parser.add_argument('name')
    rename_parser.add_argument('new_name')

    path_parser = subparsers.add_parser('path', help="Print a repository's path")
    path_parser.add_argument('name')

    return parser


def run_command(args: argparse.Namespace, registry: RepoRegistry, logger: logging.Logger) -> bool:
    """Apply a registry command.

    Args:
        args: Parsed command line arguments
        registry: Loaded registry
        logger: Application logger

    Returns:
        True if the report should run afterwards

    Raises:
        RegistryError: If the command is invalid for this registry
    """
    modified = False
    if args.command == 'add':
        for path in args.paths:
            name = registry.add(path)
            logger.info(f"Added {name}: {registry.path_of(name)}")
            modified = True
    elif args.command == 'remove':
        for name in args.names:
            registry.remove(name)
            logger.info(f"Removed {name}")
            modified = True
    elif args.command == 'rename':
        registry.rename(args.name, args.new_name)
        logger.info(f"Renamed {args.name} to {args.new_name}")
        modified = True
    elif args.command == 'path':
        print(registry.path_of(args.name))
        return False

    if modified:
        registry.save()
    return True


def run_report(config: Config, registry: RepoRegistry, summary: bool = False) -> int:
    """Open, process and print every registered repository.

    Args:
        config: Runtime configuration
        registry: Registry supplying (name, path) pairs
        summary: Whether to print the distribution summary

    Returns:
        Exit code
    """
    credentials = credentials_from_config(config.ssh_key)

    open_errors: List[OpenError] = []
    handles = open_repositories(registry, on_error=open_errors.append)

    manager = RepoManager(
        max_workers=config.workers,
        fetch=config.fetch,
        fetch_timeout=config.fetch_timeout,
        credentials=credentials
    )

    # Progress is only drawn on an interactive terminal
    tracker: Optional[ProgressTracker] = ProgressTracker() if sys.stderr.isatty() else None

    try:
        results = ResultAggregator().collect(
            len(handles),
            manager.dispatch(handles, progress=tracker.update if tracker else None)
        )
    finally:
        if tracker:
            tracker.finish()

    print_report(results)
    print_diagnostics(results, open_errors)
    if summary:
        print_distribution(results)

    return 130 if manager.cancelled else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logger = setup_logging(verbosity=args.verbose)

    try:
        # Load configuration
        config = Config.from_env_and_args(
            config_path=args.config,
            workers=args.workers,
            no_fetch=args.no_fetch,
            fetch_timeout=args.fetch_timeout,
            ssh_key=args.ssh_key,
            log_file=args.log_file
        )
        if config.log_file:
            logger = setup_logging(verbosity=args.verbose, log_file=config.log_file)

        logger.info("Configuration loaded")
        logger.info(f"  Registry: {config.config_path}")
        logger.info(f"  Workers: {config.workers}")
        logger.info(f"  Fetch: {config.fetch}")

        registry = RepoRegistry.load(config.config_path)

        if not run_command(args, registry, logger):
            return 0

        return run_report(config, registry, summary=args.summary)

    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except RegistryError as e:
        logger.error(f"Registry error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Operation cancelled by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
