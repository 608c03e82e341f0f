from typing import Literal

from pydantic import BaseModel


class ChatMessage(BaseModel):
    """One prior conversation turn handed to a provider."""

    role: Literal["user", "assistant"]
    content: str
