"""CLI entry point for toolchat-server.

This module provides the command-line interface for starting the toolchat-server.
It can be invoked as `toolchat-server` (via the script entry point) or
`python -m toolchat_server`.
"""

import argparse
import logging
import os
import sys

import uvicorn

from toolchat_server import __version__, create_app
from toolchat_server.config import ToolchatServerSettings


def main() -> None:
    """Main entry point for the toolchat-server CLI.

    Parses command-line arguments and starts the uvicorn server with the
    FastAPI application.
    """
    parser = argparse.ArgumentParser(
        prog="toolchat-server",
        description="FastAPI server for tool-calling LLM conversations via OpenAI or Ollama",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"toolchat-server {__version__}",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via TOOLCHAT_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via TOOLCHAT_PORT)",
    )

    parser.add_argument(
        "--provider",
        type=str,
        default=None,
        choices=["openai", "ollama", "none"],
        help="LLM backend (default: openai, can be set via TOOLCHAT_PROVIDER)",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model name for the selected provider (can be set via TOOLCHAT_OPENAI_MODEL or TOOLCHAT_OLLAMA_MODEL)",
    )

    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via TOOLCHAT_OLLAMA_HOST)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via TOOLCHAT_LOG_LEVEL)",
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (uvicorn --reload)",
    )

    args = parser.parse_args()

    # Build settings, CLI args override environment variables
    settings_kwargs = {}
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.provider is not None:
        settings_kwargs["provider"] = args.provider
    if args.ollama_host is not None:
        settings_kwargs["ollama_host"] = args.ollama_host
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    if args.model is not None:
        settings_kwargs["openai_model"] = args.model
        settings_kwargs["ollama_model"] = args.model

    settings = ToolchatServerSettings(**settings_kwargs)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.reload:
        # The reloader imports the app itself, so overrides travel as env vars
        for key, value in settings_kwargs.items():
            os.environ[f"TOOLCHAT_{key.upper()}"] = str(value)
        uvicorn.run(
            "toolchat_server.app:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            reload=True,
        )
        return

    # Create the FastAPI app
    app = create_app(settings=settings)

    # Start uvicorn
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    sys.exit(main())
