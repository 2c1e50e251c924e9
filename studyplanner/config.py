import os
from typing import Optional


class PlannerConfig:
    """
    Central configuration object for the planner service.
    Controls planner type, LLM backend and state storage.
    """

    PLANNER_TYPES = {"rule", "llm"}
    LLM_BACKENDS = {"ollama", "groq", "openai"}

    def __init__(
        self,
        planner_type: str = "rule",   # "rule" or "llm"
        model: Optional[str] = None,
        llm_backend: str = "ollama",  # "ollama", "groq", or "openai"
        max_tasks: int = 5,
        fallback_task_count: int = 3,
        storage_path: Optional[str] = None,
        host: str = "127.0.0.1",
        port: int = 8000,
    ):
        self.planner_type = planner_type
        self.model = model
        self.llm_backend = llm_backend
        self.max_tasks = max_tasks
        self.fallback_task_count = fallback_task_count
        self.storage_path = storage_path
        self.host = host
        self.port = port

        self._validate()

    @classmethod
    def from_env(cls) -> "PlannerConfig":
        return cls(
            planner_type=os.getenv("STUDYPLANNER_PLANNER", "rule"),
            model=os.getenv("STUDYPLANNER_MODEL") or None,
            llm_backend=os.getenv("STUDYPLANNER_LLM_BACKEND", "ollama"),
            storage_path=os.getenv("STUDYPLANNER_STATE_PATH") or None,
            host=os.getenv("STUDYPLANNER_HOST", "127.0.0.1"),
            port=int(os.getenv("STUDYPLANNER_PORT", "8000")),
        )

    def _validate(self):
        if self.planner_type not in self.PLANNER_TYPES:
            raise ValueError(f"Unsupported planner_type: {self.planner_type}")

        if self.llm_backend not in self.LLM_BACKENDS:
            raise ValueError(f"Unsupported llm_backend: {self.llm_backend}")

        if self.planner_type == "llm" and not self.model:
            raise ValueError("LLM planner requires a model name")

        if self.max_tasks < 1:
            raise ValueError("max_tasks must be at least 1")

        if not 0 < self.fallback_task_count <= self.max_tasks:
            raise ValueError("fallback_task_count must be between 1 and max_tasks")
