#!/usr/bin/env python3
"""Entry point for the configuration storage service."""

from pathlib import Path
from dotenv import load_dotenv
import uvicorn

# Load .env file from project root
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

from config_storage.config import config

if __name__ == "__main__":
    uvicorn.run(
        "config_storage.main:app",
        host="0.0.0.0",
        port=config.PMA_PORT,
        log_level=config.PMA_LOG_LEVEL.lower()
    )
