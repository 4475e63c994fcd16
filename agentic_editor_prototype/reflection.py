"""Two-pass generate-then-reflect pipeline over the same provider runtime."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .messaging.content_blocks import Message
from .messaging.transcript import TranscriptPrinter
from .provider_runtime import ProviderRuntime, ProviderRuntimeError


logger = logging.getLogger(__name__)

GENERATOR_PROMPT = (
    "You are a helpful code assistant. Given the following query, generate a solution or plan.\n"
    "Query: {query}"
)
REFLECTOR_PROMPT = (
    "Reflect on the following solution or plan. Suggest improvements, point out flaws, "
    "and provide a refined version if possible.\n"
    "Original Output: {output}"
)


class ReflectionError(RuntimeError):
    def __init__(self, stage: str, cause: ProviderRuntimeError) -> None:
        super().__init__(f"{stage} error: {cause}")
        self.stage = stage
        self.cause = cause


@dataclass
class ReflectionResult:
    query: str
    generated: str
    refined: str


def _single_shot(runtime: ProviderRuntime, prompt: str) -> str:
    return runtime.invoke([Message.user_text(prompt)], None).text


def run_reflection(
    runtime: ProviderRuntime,
    query: str,
    transcript: Optional[TranscriptPrinter] = None,
) -> ReflectionResult:
    try:
        generated = _single_shot(runtime, GENERATOR_PROMPT.format(query=query))
    except ProviderRuntimeError as exc:
        raise ReflectionError("Generator", exc) from exc
    if transcript is not None:
        transcript.section("Generator Output", generated)

    try:
        refined = _single_shot(runtime, REFLECTOR_PROMPT.format(output=generated))
    except ProviderRuntimeError as exc:
        raise ReflectionError("Reflector", exc) from exc
    if transcript is not None:
        transcript.section("Final Output (Refined)", refined)

    logger.debug("reflection done: %d -> %d chars", len(generated), len(refined))
    return ReflectionResult(query=query, generated=generated, refined=refined)
