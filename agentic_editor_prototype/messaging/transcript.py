from __future__ import annotations

import sys
from typing import Optional, TextIO


BLUE = "\u001b[94m"
YELLOW = "\u001b[93m"
GREEN = "\u001b[92m"
RESET = "\u001b[0m"

BANNER = "Chat with Claude (use 'ctrl-c' to quit)"


class TranscriptPrinter:
    """Role-prefixed, ANSI-colored transcript lines on a text stream."""

    def __init__(self, stream: Optional[TextIO] = None, *, color: bool = True) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.color = color

    def _label(self, label: str, color: str) -> str:
        if not self.color:
            return label
        return f"{color}{label}{RESET}"

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def banner(self) -> None:
        self._write(BANNER + "\n")

    def prompt(self) -> None:
        self._write(f"{self._label('You', BLUE)}: ")

    def assistant(self, text: str) -> None:
        self._write(f"{self._label('Claude', YELLOW)}: {text}\n")

    def tool_call(self, display: str) -> None:
        self._write(f"{self._label('tool', GREEN)}: {display}\n")

    def section(self, title: str, body: str) -> None:
        self._write(f"\n--- {title} ---\n{body}\n")
