from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional, TextIO

from .agent import create_agent, create_runtime
from .config import ConfigError, load_config
from .error_handling.error_handler import ErrorHandler
from .messaging.transcript import TranscriptPrinter
from .provider_runtime import ProviderRuntimeError
from .reflection import ReflectionError, run_reflection


logger = logging.getLogger(__name__)


def stdin_line_reader(stream: Optional[TextIO] = None) -> Callable[[], Optional[str]]:
    """One line per call without its newline; None at end of input."""

    def _read() -> Optional[str]:
        source = stream if stream is not None else sys.stdin
        line = source.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    return _read


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    argparse.ArgumentParser(
        prog="agentic-editor",
        description="Chat with a model that can read, list and edit files in the working directory.",
    ).parse_args(argv)

    try:
        config = load_config()
        _configure_logging(config["logging"]["level"])
        loop = create_agent(config, read_user_input=stdin_line_reader())
    except ConfigError as exc:
        sys.stderr.write(f"Config error: {exc}\n")
        return 2

    try:
        loop.run()
    except ProviderRuntimeError as exc:
        logger.error("provider failure: %s", ErrorHandler().handle_provider_error(exc))
        print(f"Error: {exc}")
        return 1
    except KeyboardInterrupt:
        print()
    return 0


def reflect_main(argv: Optional[List[str]] = None) -> int:
    argparse.ArgumentParser(
        prog="agentic-editor-reflect",
        description="Generate a solution for one query, then have the model critique and refine it.",
    ).parse_args(argv)

    try:
        config = load_config()
        _configure_logging(config["logging"]["level"])
        runtime = create_runtime(config)
    except ConfigError as exc:
        sys.stderr.write(f"Config error: {exc}\n")
        return 2

    print("Enter your query:")
    query = stdin_line_reader()()
    if query is None:
        return 0
    try:
        run_reflection(runtime, query, TranscriptPrinter())
    except ReflectionError as exc:
        logger.error("reflection failed at %s: %s", exc.stage, exc.cause)
        print(str(exc))
        return 1
    return 0
