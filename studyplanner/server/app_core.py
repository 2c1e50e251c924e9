from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from studyplanner.config import PlannerConfig
from studyplanner.llm.llm_client import CHAT_SYSTEM_PROMPT, LLMClient
from studyplanner.models import ChatMessage, DailyPlan
from studyplanner.planner import (
    ChatPromptBuilder,
    DailyPlanner,
    PlanGenerationError,
    PlanningContext,
    create_llm_client,
    create_planner,
)
from studyplanner.scheduling import annotate_goal, annotate_topic, sort_goals_by_urgency
from studyplanner.store import UserStateStore

logger = logging.getLogger(__name__)


class ChatUnavailableError(RuntimeError):
    """Raised when the study chat is used without an LLM backend."""


class StudyPlannerApp:
    """
    Server-owned application assembler.

    Wires together:
        State store
        Daily planner
        Study chat (optional, needs an LLM client)

    Every call takes `now` from the caller so the decay shown to the
    user and the plan built from it share one reference time.
    """

    def __init__(
        self,
        store: UserStateStore,
        planner: DailyPlanner,
        llm_client: Optional[LLMClient] = None,
        chat_prompt_builder: Optional[ChatPromptBuilder] = None,
    ):
        self.store = store
        self.planner = planner
        self.llm_client = llm_client
        self.chat_prompt_builder = chat_prompt_builder or ChatPromptBuilder()

    @staticmethod
    def create(
        config: PlannerConfig,
        llm_client: Optional[LLMClient] = None,
    ) -> "StudyPlannerApp":

        # The chat needs a client even when plans come from the rule planner
        if llm_client is None and config.model:
            llm_client = create_llm_client(config)

        store = UserStateStore(storage_path=config.storage_path)
        planner = create_planner(config, llm_client=llm_client)

        logger.info(
            "[APP] Ready | planner=%s | backend=%s | chat=%s | persistent=%s",
            planner.name,
            config.llm_backend if llm_client is not None else None,
            llm_client is not None,
            bool(config.storage_path),
        )

        return StudyPlannerApp(store, planner, llm_client=llm_client)

    # ============================================================
    # READ VIEWS
    # ============================================================

    def goals_with_decay(self, user_id: str, now: datetime) -> List[Dict[str, Any]]:
        goals = sort_goals_by_urgency(self.store.list_goals(user_id), now)
        sessions = self.store.sessions(user_id)
        return [annotate_goal(g, now, sessions=sessions) for g in goals]

    def topics_needing_review(self, user_id: str, now: datetime) -> List[Dict[str, Any]]:
        return [
            annotate_topic(t, now)
            for t in self.store.topics_needing_review(user_id, now)
        ]

    # ============================================================
    # PLAN GENERATION
    # ============================================================

    def generate_plan(self, user_id: str, date: str, now: datetime) -> DailyPlan:

        context = PlanningContext.build(
            date=date,
            now=now,
            goals=self.store.list_goals(user_id),
            review_topics=self.store.topics_needing_review(user_id, now),
        )

        plan = self.planner.generate_plan(context)

        if plan.is_empty():
            logger.warning("[APP] Empty plan | user=%s | date=%s", user_id, date)
            raise PlanGenerationError(
                "No valid tasks could be generated from current goals"
            )

        return self.store.save_daily_plan(user_id, plan)

    # ============================================================
    # STUDY CHAT
    # ============================================================

    def chat(self, user_id: str, message: str, now: datetime) -> ChatMessage:
        """
        Answer one chat message with the user's goals, due topics and
        recent history in the prompt. The exchange is stored only when
        the LLM call succeeds.
        """

        if self.llm_client is None:
            raise ChatUnavailableError("Chat requires an LLM backend (set STUDYPLANNER_MODEL)")

        prompt = self.chat_prompt_builder.build(
            message=message,
            now=now,
            goals=sort_goals_by_urgency(self.store.list_goals(user_id), now),
            review_topics=self.store.topics_needing_review(user_id, now),
            history=self.store.chat_history(user_id),
        )

        reply = self.llm_client.chat(
            prompt, strict=False, system_prompt=CHAT_SYSTEM_PROMPT
        ).strip()

        history = self.store.append_chat_exchange(user_id, message, reply, now)

        logger.info("[APP] Chat reply | user=%s | chars=%d", user_id, len(reply))
        return history[-1]

    def chat_history(self, user_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return [m.to_dict() for m in self.store.chat_history(user_id, limit)]
