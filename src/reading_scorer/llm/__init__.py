from __future__ import annotations

from .openai_client import OpenAIChatClient, RequestMetadata

__all__ = ["OpenAIChatClient", "RequestMetadata"]
