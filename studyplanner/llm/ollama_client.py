from typing import Optional

import requests

from .llm_client import LLMClient


class OllamaClient(LLMClient):
    """Local Ollama server; no API key needed."""

    def __init__(
        self,
        model: str = "llama3:8b",
        base_url: str = "http://localhost:11434/api/chat",
        timeout_seconds: int = 60,
        max_tokens: int = 1024,
    ):
        self.model = model
        self.url = base_url
        self.timeout = timeout_seconds
        self.max_tokens = max_tokens

    def chat(
        self,
        prompt: str,
        strict: bool = False,
        system_prompt: Optional[str] = None,
    ) -> str:

        payload = {
            "model": self.model,
            "messages": self.build_messages(prompt, system_prompt),
            "stream": False,
            "options": {
                "num_predict": self.max_tokens,
                "temperature": 0 if strict else 0.7,
            },
        }

        # Plans must come back as a single JSON object
        if strict:
            payload["format"] = "json"

        try:
            response = requests.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout:
            raise TimeoutError(f"Ollama did not answer within {self.timeout}s")
        except requests.RequestException as e:
            raise ConnectionError(f"Ollama request failed: {e}")

        try:
            return response.json()["message"]["content"]
        except (KeyError, ValueError) as e:
            raise ValueError(f"Unexpected Ollama response format: {e}")
