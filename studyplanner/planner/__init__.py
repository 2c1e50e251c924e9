from .context import PlanningContext
from .interface import DailyPlanner, PlanGenerationError
from .rule_planner import RuleBasedPlanner
from .prompt_builder import PlannerPromptBuilder
from .chat_prompt_builder import ChatPromptBuilder
from .adapters.llm_planner import LLMPlanner
from .factory import create_llm_client, create_planner

__all__ = [
    "PlanningContext",
    "DailyPlanner",
    "PlanGenerationError",
    "RuleBasedPlanner",
    "PlannerPromptBuilder",
    "ChatPromptBuilder",
    "LLMPlanner",
    "create_llm_client",
    "create_planner",
]
