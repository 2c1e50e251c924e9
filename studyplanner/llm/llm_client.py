from abc import ABC, abstractmethod
from typing import Dict, List, Optional

PLANNER_SYSTEM_PROMPT = (
    "You are a helpful study planner AI. Always respond with valid JSON only."
)

CHAT_SYSTEM_PROMPT = (
    "You are a friendly study coach. You know the student's goals, deadlines "
    "and which topics are due for review. Answer briefly and concretely."
)


class LLMClient(ABC):
    """
    Chat-model transport shared by the daily planner and the study chat.

    The planner calls with `strict=True` and the JSON-only planner
    system prompt; the chat route calls with `strict=False` and
    CHAT_SYSTEM_PROMPT. Transport failures raise: LLMPlanner turns
    them into a fallback plan, the chat route into a 500.
    """

    model: str = ""
    default_system_prompt: str = PLANNER_SYSTEM_PROMPT

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def build_messages(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
    ) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt or self.default_system_prompt},
            {"role": "user", "content": prompt},
        ]

    @abstractmethod
    def chat(
        self,
        prompt: str,
        strict: bool = False,
        system_prompt: Optional[str] = None,
    ) -> str:
        """
        Send one system + user exchange and return the raw reply text.

        strict=True asks for deterministic JSON (temperature 0 and the
        backend's JSON mode where it has one).
        """
        raise NotImplementedError
