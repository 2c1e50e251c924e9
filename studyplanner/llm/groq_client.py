import os
import logging
from typing import Optional

import requests

from .llm_client import LLMClient

logger = logging.getLogger(__name__)


class GroqClient(LLMClient):

    def __init__(self, model: str = "llama-3.1-8b-instant", timeout_seconds: int = 30):
        self.model = model
        self.url = "https://api.groq.com/openai/v1/chat/completions"
        self.timeout = timeout_seconds

        self.api_key = os.getenv("GROQ_API_KEY")

        if not self.api_key:
            raise RuntimeError(
                "GROQ_API_KEY environment variable not set"
            )

    def chat(
        self,
        prompt: str,
        strict: bool = False,
        system_prompt: Optional[str] = None,
    ) -> str:

        temperature = 0 if strict else 0.7

        logger.info(
            "[GROQ] model=%s | strict=%s | prompt_chars=%d",
            self.model,
            strict,
            len(prompt),
        )
        logger.debug(f"Prompt preview:\n{prompt[:2000]}")

        payload = {
            "model": self.model,
            "messages": self.build_messages(prompt, system_prompt),
            "temperature": temperature,
        }

        if strict:
            payload["response_format"] = {"type": "json_object"}

        response = requests.post(
            self.url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
            timeout=self.timeout,
        )

        response.raise_for_status()

        data = response.json()
        content = data["choices"][0]["message"]["content"]

        logger.debug(f"[GROQ] Response:\n{content}")

        return content
