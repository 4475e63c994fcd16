"""
Turn-taking loop between the user, the model, and local tools.

The loop is a two-state machine driven by an explicit `LoopState` value:

- AWAIT_USER_INPUT: read a line (None means end of input and ends the run),
  append it as a user message, then call the model.
- PROCESS_TOOL_RESULTS: the previous model message asked for tools; their
  results were appended as one user message, so call the model again
  without reading input.

Provider failures propagate and end the run. Tool failures never do: the
registry turns them into error tool_result blocks for the model to read.
"""
from __future__ import annotations

import enum
import logging
from typing import Callable, List, Optional

from .messaging.content_blocks import Conversation, Message, TextBlock, ToolResultBlock, ToolUseBlock
from .messaging.transcript import TranscriptPrinter
from .provider_runtime import ProviderRuntime
from .tool_call_ir import to_tool_call_ir
from .tool_registry import ToolRegistry


logger = logging.getLogger(__name__)


class LoopState(enum.Enum):
    AWAIT_USER_INPUT = "await_user_input"
    PROCESS_TOOL_RESULTS = "process_tool_results"


class ConversationLoop:
    def __init__(
        self,
        runtime: ProviderRuntime,
        registry: ToolRegistry,
        read_user_input: Callable[[], Optional[str]],
        transcript: Optional[TranscriptPrinter] = None,
    ) -> None:
        self.runtime = runtime
        self.registry = registry
        self.read_user_input = read_user_input
        self.transcript = transcript or TranscriptPrinter()
        self.conversation = Conversation()
        self.state = LoopState.AWAIT_USER_INPUT
        self.model_calls = 0

    def _handle_response(self, message: Message) -> List[ToolResultBlock]:
        results: List[ToolResultBlock] = []
        for block in message.content:
            if isinstance(block, TextBlock):
                self.transcript.assistant(block.text)
            elif isinstance(block, ToolUseBlock):
                if block.name in self.registry:
                    self.transcript.tool_call(to_tool_call_ir(block).display())
                results.append(self.registry.dispatch(block))
        return results

    def run(self) -> Conversation:
        tools = self.registry.declarations()
        self.transcript.banner()
        self.state = LoopState.AWAIT_USER_INPUT

        while True:
            if self.state is LoopState.AWAIT_USER_INPUT:
                self.transcript.prompt()
                user_input = self.read_user_input()
                if user_input is None:
                    logger.debug("end of input after %d model calls", self.model_calls)
                    break
                self.conversation.append(Message.user_text(user_input))

            message = self.runtime.invoke(self.conversation.messages, tools)
            self.model_calls += 1
            self.conversation.append(message)

            results = self._handle_response(message)
            if not results:
                self.state = LoopState.AWAIT_USER_INPUT
                continue

            self.conversation.append(Message.tool_results(results))
            self.state = LoopState.PROCESS_TOOL_RESULTS

        return self.conversation
