#!/usr/bin/env python3
"""
Script to run the Facilitator Analytics API server.

Usage:
    python scripts/start_api.py --host 0.0.0.0 --port 8010
    python scripts/start_api.py --port 8010 --reload
"""

import argparse
import os

import uvicorn
from chainswarm_core.observability import setup_logger
from dotenv import load_dotenv
from loguru import logger


def main():
    parser = argparse.ArgumentParser(description='Run Facilitator Analytics API')
    parser.add_argument(
        '--host',
        type=str,
        default=os.getenv("API_HOST", "0.0.0.0"),
        help='Host to bind to (default: 0.0.0.0 or API_HOST env var)'
    )
    parser.add_argument(
        '--port',
        type=int,
        default=int(os.getenv("API_PORT", "8010")),
        help='Port to listen on (default: 8010 or API_PORT env var)'
    )
    parser.add_argument(
        '--reload',
        action='store_true',
        help='Enable auto-reload for development'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default=os.getenv('LOG_LEVEL', 'INFO').upper(),
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Log level (default: INFO or LOG_LEVEL env var)'
    )

    args = parser.parse_args()

    load_dotenv()
    os.environ["LOG_LEVEL"] = args.log_level
    setup_logger("facilitator-analytics-api")

    logger.bind(
        host=args.host,
        port=args.port,
        reload=args.reload,
        clickhouse_host=os.getenv("CLICKHOUSE_HOST", "localhost"),
    ).info("Starting Facilitator Analytics API")
    logger.info(f"API docs available at http://{args.host}:{args.port}/docs")

    uvicorn.run(
        "facilitator_analytics.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower()
    )


if __name__ == "__main__":
    main()
