# -*- coding: utf-8 -*-
# @file main.py
# @brief FastAPI application entry point
# @author sailing-innocent
# @date 2026-10-19

import argparse
import logging
import os
from pathlib import Path

# Load environment variables FIRST, before any other imports
from scriptorium.config import load_environment

parser = argparse.ArgumentParser()
parser.add_argument("--mode", type=str, default="dev", help="Mode: dev, debug, prod")
parser.add_argument("--host", type=str, default="127.0.0.1")
parser.add_argument("--port", type=int, default=8000)
args, unknown = parser.parse_known_args()

env_path = load_environment(args.mode, Path(__file__).parent)

from scriptorium.utils.log import configure_logging

configure_logging()
logger = logging.getLogger("scriptorium")

if env_path is not None:
    logger.info("Loaded environment variables from %s", env_path.name)
else:
    logger.warning("No environment file found for mode %s; using defaults", args.mode)

# NOW import server modules (after env vars are loaded)
import uvicorn

from scriptorium.app import create_app

app = create_app()


if __name__ == "__main__":
    logger.info("Starting Scriptorium API in %s mode...", args.mode)
    logger.info("Database URI: %s", os.environ.get("SCRIPTORIUM_DB_URI", "(data dir default)"))
    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=args.mode == "dev",
    )
