#!/usr/bin/env python3
"""
Main entry point for the lesson scheduler.
Provides options to run the scheduler in different modes:
- CLI mode: Build a month schedule from the command line
- API mode: Start a REST API server
"""
import os
import argparse
import logging

from dotenv import load_dotenv

# Environment from a local .env file, if present
load_dotenv()

from lesson_scheduler.cli import main as cli_main, setup_logging
from lesson_scheduler.api import app as api_app


def parse_args():
    """Parse command-line arguments for the main entry point."""
    parser = argparse.ArgumentParser(
        description='Monthly Lesson Scheduler',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        '--mode',
        type=str,
        choices=['cli', 'api'],
        default='cli',
        help='Mode to run the scheduler in'
    )

    parser.add_argument(
        '--port',
        type=int,
        default=int(os.environ.get('PORT', 5000)),
        help='Port to run the API server on (only in API mode)'
    )

    parser.add_argument(
        '--host',
        type=str,
        default=os.environ.get('HOST', '0.0.0.0'),
        help='Host to bind the API server to (only in API mode)'
    )

    # Parse known args and pass the rest to the appropriate mode
    return parser.parse_known_args()


def main():
    """Main entry point."""
    args, remaining = parse_args()

    if args.mode == 'cli':
        cli_main(remaining)

    elif args.mode == 'api':
        setup_logging(os.environ.get('LOG_LEVEL', 'INFO'))
        logging.getLogger(__name__).info(f"Starting API server on {args.host}:{args.port}")
        api_app.run(host=args.host, port=args.port)


if __name__ == '__main__':
    main()
