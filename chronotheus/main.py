#!/usr/bin/env python3
"""
Chronotheus proxy server - config-first, one upstream, fixed windows

Entry point that loads configuration, sets up logging and runs the
FastAPI app under uvicorn.
"""

import argparse
import logging

import uvicorn

from .core.config import load_config
from .core.server import create_app

logger = logging.getLogger("chronotheus.server")


def main():
    """Main entry point for the Chronotheus proxy."""
    parser = argparse.ArgumentParser(description="Chronotheus - Prometheus historical data proxy")
    parser.add_argument("-c", "--config", help="Path to YAML config")
    parser.add_argument("--host", help="address to listen on")
    parser.add_argument("--port", type=int, help="port to listen on")
    parser.add_argument("--upstream", help="upstream Prometheus base URL (e.g., http://localhost:9090)")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    args = parser.parse_args()

    # Load configuration: YAML first, then CLI overrides
    config = load_config(args.config)
    overrides = {"host": args.host, "port": args.port, "upstream_url": args.upstream}
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if args.debug:
        overrides["log_level"] = "DEBUG"
    if overrides:
        config = config.model_copy(update=overrides)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Chronotheus listening on {config.host}:{config.port}")

    app = create_app(config)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        reload=False,
        access_log=False,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
