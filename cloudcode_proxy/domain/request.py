"""
Request Domain Model

Defines the Messages API request accepted on /v1/messages.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class MessagesRequest(BaseModel):
    """
    Messages API Request

    Only the fields the proxy understands are kept; anything else the client
    sends is ignored. Content blocks stay plain dictionaries because the
    converters tolerate malformed blocks instead of rejecting them.
    """

    model_config = ConfigDict(extra="ignore")

    # Requested Model Name, filled from DEFAULT_MODEL when empty
    model: Optional[str] = Field(None, description="Requested Model Name")
    # Conversation turns ({role, content})
    messages: list[Any] = Field(..., description="Conversation Messages")
    # Output token limit, filled from DEFAULT_MAX_TOKENS when empty
    max_tokens: Optional[int] = Field(None, description="Max Output Tokens")
    # System prompt: string or list of text blocks
    system: Optional[Union[str, list[dict[str, Any]]]] = None
    # Sampling parameters
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    stop_sequences: Optional[list[str]] = None
    # Tool definitions
    tools: Optional[list[dict[str, Any]]] = None
    # Passed through untouched
    tool_choice: Optional[Any] = None
    # Reasoning directive, never forwarded for the Claude family
    thinking: Optional[Any] = None
    stream: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Plain dictionary for the converters, unset fields omitted"""
        return self.model_dump(exclude_none=True)

    def with_defaults(self, default_model: str, default_max_tokens: int) -> "MessagesRequest":
        """Copy with the model and token limit filled in when the client left them empty"""
        return self.model_copy(
            update={
                "model": self.model or default_model,
                "max_tokens": self.max_tokens or default_max_tokens,
            }
        )
