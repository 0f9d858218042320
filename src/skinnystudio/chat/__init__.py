"""Chat pipeline: provider streaming, SSE relay, generation dispatch, usage log."""

from skinnystudio.chat.models import ChatRequest, GenerationStatus, TokenUsage
from skinnystudio.chat.pipeline import ChatTurn, resolve_api_key

__all__ = ["ChatRequest", "ChatTurn", "GenerationStatus", "TokenUsage", "resolve_api_key"]
