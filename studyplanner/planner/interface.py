from abc import ABC, abstractmethod

from ..models import DailyPlan
from .context import PlanningContext


class PlanGenerationError(Exception):
    """Raised when no valid task can be planned for the requested day."""


class DailyPlanner(ABC):
    """
    Abstract planning interface.

    A DailyPlanner turns the user's active goals and the topics due for
    review into a task list for one day.

    Implementations may be:
    - Rule-based (deterministic)
    - LLM-based (Ollama/Groq/OpenAI)
    """

    @property
    def name(self) -> str:
        """
        Return planner identity.

        Recorded in plan metadata and logs.
        """
        return self.__class__.__name__

    @abstractmethod
    def generate_plan(self, context: PlanningContext) -> DailyPlan:
        """
        Generate a daily plan.

        Parameters
        ----------
        context : PlanningContext
            Snapshot of the user's goals and due topics, evaluated at
            a single reference time.

        Returns
        -------
        DailyPlan
            Possibly empty; callers decide whether an empty plan is
            an error.
        """
        raise NotImplementedError
