import json
import logging
import time
from typing import Any, Dict, List

from ..context import PlanningContext
from ..interface import DailyPlanner
from ..prompt_builder import PlannerPromptBuilder
from ..rule_planner import RuleBasedPlanner
from ...llm.llm_client import LLMClient, PLANNER_SYSTEM_PROMPT
from ...models import DailyPlan, PlannedTask, TASK_TYPES
from .utils import extract_json

logger = logging.getLogger(__name__)

DEFAULT_TASK_MINUTES = 30


# ============================================================
# LLM Planner
# ============================================================

class LLMPlanner(DailyPlanner):
    """
    Asks an LLM for the day's task list and validates the answer.

    Model output is untrusted: tasks pointing at unknown goals or topics
    are dropped. Transport errors, unparseable output or an answer with
    no valid task fall back to the deterministic RuleBasedPlanner.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        fallback: RuleBasedPlanner = None,
        max_tasks: int = 5,
    ):
        self.llm = llm_client
        self.fallback = fallback or RuleBasedPlanner()
        self.max_tasks = max_tasks
        self.prompt_builder = PlannerPromptBuilder(
            min_tasks=min(3, max_tasks),
            max_tasks=max_tasks,
        )

    # ============================================================
    # MAIN PLANNING
    # ============================================================

    def generate_plan(self, context: PlanningContext) -> DailyPlan:

        logger.info(
            "[LLM PLANNER] date=%s | goals=%d | review_topics=%d",
            context.date,
            len(context.goals),
            len(context.review_topics),
        )

        if not context.goals:
            return self._fallback_plan(context, "No active goals to plan for.")

        prompt = self.prompt_builder.build(context)

        start_time = time.time()

        try:
            raw_text = self.llm.chat(
                prompt, strict=True, system_prompt=PLANNER_SYSTEM_PROMPT
            )
        except Exception as e:
            logger.error("[LLM PLANNER] LLM call failed: %s", e)
            return self._fallback_plan(context, f"AI request failed ({e}), using default plan.")

        latency = time.time() - start_time
        logger.info(f"[LLM LATENCY] {latency:.2f}s")
        logger.debug(f"[LLM RAW OUTPUT]\n{raw_text}")

        try:
            result = self._parse(raw_text)
        except ValueError as e:
            logger.error("[LLM PLANNER] AI response parse error: %s", e)
            return self._fallback_plan(
                context,
                "AI response parsing failed, using default plan.",
            )

        tasks = self._validate_tasks(result.get("tasks"), context)

        if not tasks:
            return self._fallback_plan(
                context,
                "AI plan referenced no valid goals or topics, using default plan.",
            )

        reasoning = result.get("reasoning")
        if not isinstance(reasoning, str) or not reasoning.strip():
            reasoning = "AI-generated daily study plan"

        logger.info("[LLM PLANNER] Accepted %d task(s)", len(tasks))

        return DailyPlan(
            date=context.date,
            generated_at=context.now,
            tasks=tasks,
            reasoning=reasoning,
            meta={
                "planner": self.name,
                "model": getattr(self.llm, "model", None),
                "latency_seconds": latency,
                "fallback": False,
            },
        )

    # ============================================================
    # PARSING + VALIDATION
    # ============================================================

    @staticmethod
    def _parse(raw_text: str) -> Dict[str, Any]:

        # Try direct JSON parse first
        try:
            result = json.loads(raw_text)
        except (TypeError, ValueError):
            extracted = extract_json(raw_text or "")
            if not extracted:
                raise ValueError("No JSON object found in LLM output")
            result = json.loads(extracted)

        if not isinstance(result, dict):
            raise ValueError("LLM output must be a JSON object")

        return result

    def _validate_tasks(self, tasks_json, context: PlanningContext) -> List[PlannedTask]:

        if not isinstance(tasks_json, list):
            logger.warning("[LLM PLANNER] 'tasks' is not a list")
            return []

        valid: List[PlannedTask] = []
        seen = set()

        for raw in tasks_json:
            if not isinstance(raw, dict):
                continue

            goal_id = raw.get("goalId")
            topic_id = raw.get("topicId")

            if context.find_topic(goal_id, topic_id) is None:
                logger.warning(
                    "[LLM PLANNER] Dropping task with unknown reference | goal=%s | topic=%s",
                    goal_id,
                    topic_id,
                )
                continue

            if (goal_id, topic_id) in seen:
                continue
            seen.add((goal_id, topic_id))

            valid.append(self._coerce_task(raw))

            if len(valid) >= self.max_tasks:
                break

        return valid

    @staticmethod
    def _coerce_task(raw: Dict[str, Any]) -> PlannedTask:
        task_type = raw.get("type")
        if task_type not in TASK_TYPES:
            task_type = "study"

        try:
            minutes = int(raw.get("estimatedMinutes", DEFAULT_TASK_MINUTES))
        except (TypeError, ValueError, OverflowError):
            minutes = DEFAULT_TASK_MINUTES

        reasoning = raw.get("reasoning")
        if not isinstance(reasoning, str):
            reasoning = ""

        return PlannedTask(
            topic_id=raw["topicId"],
            goal_id=raw["goalId"],
            type=task_type,
            estimated_minutes=minutes,
            priority=raw.get("priority", 3),
            reasoning=reasoning,
        )

    # ============================================================
    # FALLBACK
    # ============================================================

    def _fallback_plan(self, context: PlanningContext, reason: str) -> DailyPlan:

        logger.warning(f"[FALLBACK REASON] {reason}")

        plan = self.fallback.generate_plan(context, reason=reason)
        plan.meta["planner"] = self.name
        plan.meta["fallback_planner"] = self.fallback.name
        return plan
