from typing import Optional

from studyplanner.config import PlannerConfig
from .interface import DailyPlanner
from .rule_planner import RuleBasedPlanner
from .adapters.llm_planner import LLMPlanner
from ..llm.llm_client import LLMClient


def create_llm_client(config: PlannerConfig) -> LLMClient:
    # Lazy imports prevent unnecessary dependency loading
    if config.llm_backend == "ollama":
        from studyplanner.llm import OllamaClient
        return OllamaClient(model=config.model)

    if config.llm_backend == "groq":
        from studyplanner.llm import GroqClient
        return GroqClient(model=config.model)

    if config.llm_backend == "openai":
        from studyplanner.llm.openai_client import OpenAIClient
        return OpenAIClient(model=config.model)

    raise ValueError(f"Unsupported llm_backend: {config.llm_backend}")


def create_planner(
    config: PlannerConfig,
    llm_client: Optional[LLMClient] = None,
) -> DailyPlanner:
    """
    Factory for constructing the daily planner.

    Supported planner types:
    - "rule" → deterministic review planner
    - "llm"  → LLM planner with rule-based fallback

    `llm_client` overrides the configured backend (used by tests).
    """

    fallback = RuleBasedPlanner(task_count=config.fallback_task_count)

    if config.planner_type == "rule":
        return fallback

    if config.planner_type == "llm":
        client = llm_client or create_llm_client(config)
        return LLMPlanner(client, fallback=fallback, max_tasks=config.max_tasks)

    raise ValueError(
        f"Unsupported planner_type: {config.planner_type}"
    )
