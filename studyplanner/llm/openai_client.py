import logging
from typing import Optional

from openai import OpenAI

from .llm_client import LLMClient

logger = logging.getLogger(__name__)


class OpenAIClient(LLMClient):
    """
    OpenAI chat completions backend.
    Reads OPENAI_API_KEY from the environment through the SDK.
    """

    def __init__(self, model: str = "gpt-4o-mini"):
        self.client = OpenAI()
        self.model = model

    def chat(
        self,
        prompt: str,
        strict: bool = False,
        system_prompt: Optional[str] = None,
    ) -> str:

        kwargs = {}
        if strict:
            kwargs["temperature"] = 0
            kwargs["response_format"] = {"type": "json_object"}

        logger.info("[OPENAI] model=%s | strict=%s", self.model, strict)

        response = self.client.chat.completions.create(
            model=self.model,
            messages=self.build_messages(prompt, system_prompt),
            **kwargs,
        )

        return (response.choices[0].message.content or "").strip()
