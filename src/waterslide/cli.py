"""
Command Line Interface for waterslide.

Runs YAML-configured pipelines and manages their configuration files.
Pipeline output goes to stdout (or a file), one item per line; logs go
to stderr.

Usage Examples:
--------------

# Run a pipeline over a JSON Lines file
waterslide run pipeline.yaml -i data/users.jsonl

# Read from stdin, write to a file, stop after 100 items
cat users.jsonl | waterslide run pipeline.yaml -o out.jsonl -n 100

# Override the URL of an http source
waterslide run pipeline.yaml --url https://api.example.com/users

# Create default configuration
waterslide config --create-default -o pipeline.yaml

# Validate configuration
waterslide config --validate pipeline.yaml

# Verbose logging
waterslide -v run pipeline.yaml -i users.jsonl
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from .core.pipeline_runner import PipelineRunner
from .config.pipeline_config import ConfigLoader, validate_config, ConfigurationError


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """
    Setup logging configuration.

    Args:
        verbose: Enable debug-level logging if True
        log_file: Also write logs to this file
    """
    level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )

    # Set third-party loggers to WARNING to reduce noise
    if not verbose:
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)


def format_item(item: Any) -> str:
    """Render an output item as one line."""
    if isinstance(item, str):
        return item
    if isinstance(item, (bytes, bytearray)):
        return item.decode('utf-8')
    return json.dumps(item, ensure_ascii=False)


def run_command(args) -> int:
    """
    Execute the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    logger = logging.getLogger(__name__)

    try:
        config = ConfigLoader.load_from_yaml(args.config)

        # Override with command line arguments
        if args.input:
            config.source.type = 'jsonl'
            config.source.path = args.input
            logger.info(f"Reading input from {args.input}")

        if args.url:
            config.source.type = 'http'
            config.source.url = args.url
            logger.info(f"Reading input from {args.url}")

        validate_config(config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    runner = PipelineRunner(config)
    output = sys.stdout

    try:
        if args.output:
            output = open(args.output, 'w', encoding='utf-8')
        runner.run(sink=lambda item: output.write(format_item(item) + '\n'),
                   limit=args.limit)
    except KeyboardInterrupt:
        logger.info("Run interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=args.verbose)
        return 1
    finally:
        if output is not sys.stdout:
            output.close()
        else:
            output.flush()

    if args.stats:
        runner.print_status()

    return 0


def config_command(args) -> int:
    """
    Execute the config command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    logger = logging.getLogger(__name__)

    try:
        if args.create_default:
            config = ConfigLoader.create_default_config()
            output_path = args.output or 'pipeline.yaml'
            ConfigLoader.save_to_yaml(config, output_path)
            print(f"✓ Default configuration created at: {output_path}")

        elif args.validate:
            print(f"Validating configuration: {args.validate}")
            config = ConfigLoader.load_from_yaml(args.validate)
            validate_config(config)
            print(f"✓ Configuration is valid: {args.validate}")

        else:
            print("Error: Please specify --create-default or --validate")
            return 1

    except ConfigurationError as e:
        print(f"✗ Configuration error: {e}")
        logger.error(f"Configuration error: {e}")
        return 1

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog='waterslide',
        description='waterslide - run linear, lazy data pipelines',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s run pipeline.yaml -i users.jsonl
  %(prog)s run pipeline.yaml --url https://api.example.com/users -n 10
  %(prog)s config --create-default -o pipeline.yaml
  %(prog)s config --validate pipeline.yaml
        """
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose (debug) logging'
    )

    parser.add_argument(
        '--log-file',
        metavar='FILE',
        help='Also write logs to FILE'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========================================================================
    # RUN COMMAND
    # ========================================================================
    run_parser = subparsers.add_parser(
        'run',
        help='Run a configured pipeline',
        description='Run the pipeline described by a YAML configuration file'
    )

    run_parser.add_argument(
        'config',
        help='Path to YAML configuration file'
    )

    run_parser.add_argument(
        '-i', '--input',
        metavar='FILE',
        help="Read JSON Lines from FILE ('-' for stdin) instead of the configured source"
    )

    run_parser.add_argument(
        '--url',
        help='Read from this JSON HTTP endpoint instead of the configured source'
    )

    run_parser.add_argument(
        '-o', '--output',
        metavar='FILE',
        help='Write output to FILE (default: stdout)'
    )

    run_parser.add_argument(
        '-n', '--limit',
        type=int,
        metavar='N',
        help='Stop after N output items'
    )

    run_parser.add_argument(
        '--stats',
        action='store_true',
        help='Print per-stage statistics to stderr when done'
    )

    run_parser.set_defaults(func=run_command)

    # ========================================================================
    # CONFIG COMMAND
    # ========================================================================
    config_parser = subparsers.add_parser(
        'config',
        help='Configuration management',
        description='Create or validate configuration files'
    )

    config_parser.add_argument(
        '--create-default',
        action='store_true',
        help='Create a default configuration file'
    )

    config_parser.add_argument(
        '--validate',
        metavar='FILE',
        help='Validate a configuration file'
    )

    config_parser.add_argument(
        '-o', '--output',
        metavar='FILE',
        help='Output path for created configuration (default: pipeline.yaml)'
    )

    config_parser.set_defaults(func=config_command)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_file)

    if not hasattr(args, 'func'):
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
