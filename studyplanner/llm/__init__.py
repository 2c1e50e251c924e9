"""
LLM transport layer.

Exposes:
- LLMClient (abstract interface) and the planner / chat system prompts
- OllamaClient (local backend)
- GroqClient (remote backend)
- OpenAIClient (remote backend, loaded lazily)
"""

from .llm_client import CHAT_SYSTEM_PROMPT, PLANNER_SYSTEM_PROMPT, LLMClient
from .ollama_client import OllamaClient
from .groq_client import GroqClient

__all__ = [
    "CHAT_SYSTEM_PROMPT",
    "PLANNER_SYSTEM_PROMPT",
    "LLMClient",
    "OllamaClient",
    "GroqClient",
]
