from .llm_planner import LLMPlanner
from .utils import extract_json, extract_first_json

__all__ = ["LLMPlanner", "extract_json", "extract_first_json"]
