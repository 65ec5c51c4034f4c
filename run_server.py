#!/usr/bin/env python3
"""Run the Crazy Eights Web API server."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv


def main():
    """Run the server."""
    # Load .env file if it exists
    env_file = Path(__file__).parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)
        print(f"Loaded environment from {env_file}")

    uvicorn.run(
        "web.api:app",
        host=os.environ.get("CRAZY8_HOST", "0.0.0.0"),
        port=int(os.environ.get("CRAZY8_PORT", "8000")),
        reload=os.environ.get("CRAZY8_RELOAD", "").lower() in ("1", "true", "yes"),
        log_level=os.environ.get("CRAZY8_LOG_LEVEL", "info"),
    )


if __name__ == "__main__":
    main()
