from .content_blocks import (
    ContentBlock,
    Conversation,
    ConversationError,
    Message,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
)

__all__ = [
    "ContentBlock",
    "Conversation",
    "ConversationError",
    "Message",
    "TextBlock",
    "ToolResultBlock",
    "ToolUseBlock",
]
