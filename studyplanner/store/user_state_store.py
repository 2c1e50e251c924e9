from __future__ import annotations

from copy import deepcopy
from datetime import datetime
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Iterable, List, Optional
import json
import os
import logging

from ..models import (
    ChatMessage,
    DailyPlan,
    Goal,
    GOAL_STATUSES,
    GOAL_TYPES,
    StudySession,
    Topic,
    UserState,
)
from ..models.goal import MAX_PRIORITY, MIN_PRIORITY, parse_deadline
from ..scheduling import (
    active_goals,
    sort_topics_by_urgency,
    topics_due_for_review,
)
from ..scheduling.clock import to_utc

logger = logging.getLogger(__name__)

MASTERY_STEP = 10
MAX_CHAT_HISTORY = 100


class StateValidationError(Exception):
    """Raised when a write would produce an invalid record."""


class UserStateStore:
    """
    Authoritative per-user store of goals, sessions and daily plans.

    All reads and writes go through a single re-entrant lock, so writes
    for a user are serialized. Returned records are copies; mutate
    through the store methods only.

    When `storage_path` is set the full state is loaded at startup and
    rewritten after every mutation.
    """

    def __init__(self, storage_path: Optional[str] = None) -> None:
        self._users: Dict[str, UserState] = {}
        self._lock = RLock()
        self._storage = Path(storage_path) if storage_path else None

        self._load_from_disk()

    # ==========================================================
    # Goals
    # ==========================================================

    def create_goal(
        self,
        user_id: str,
        *,
        title: str,
        type: str,
        deadline: Any,
        priority: int,
        topics: Iterable[str] = (),
        now: datetime,
    ) -> Goal:

        if not title or not isinstance(title, str):
            raise StateValidationError("title is required")

        self._validate_type(type)
        self._validate_priority(priority)
        deadline = self._parse_deadline(deadline)

        goal = Goal(
            title=title,
            type=type,
            deadline=deadline,
            priority=priority,
            created_at=now,
        )
        goal.topics = [
            Topic(goal_id=goal.id, name=name.strip())
            for name in topics
            if name and name.strip()
        ]

        with self._lock:
            self._state(user_id).goals.append(goal)
            self._save_to_disk()

        logger.info(
            "[STORE] Goal created | user=%s | goal=%s | topics=%d",
            user_id,
            goal.id,
            len(goal.topics),
        )
        return deepcopy(goal)

    def list_goals(self, user_id: str, include_inactive: bool = False) -> List[Goal]:
        with self._lock:
            goals = self._state(user_id).goals
            if not include_inactive:
                goals = active_goals(goals)
            return deepcopy(list(goals))

    def get_goal(self, user_id: str, goal_id: str) -> Goal:
        with self._lock:
            return deepcopy(self._require_goal(user_id, goal_id))

    def update_goal(self, user_id: str, goal_id: str, updates: Dict[str, Any]) -> Goal:
        """
        Apply a partial update. Only title, type, deadline, priority and
        status are writable; other keys are ignored.
        """
        with self._lock:
            goal = self._require_goal(user_id, goal_id)
            changes: Dict[str, Any] = {}

            if updates.get("title") is not None:
                if not isinstance(updates["title"], str) or not updates["title"]:
                    raise StateValidationError("title must be a non-empty string")
                changes["title"] = updates["title"]

            if updates.get("type") is not None:
                self._validate_type(updates["type"])
                changes["type"] = updates["type"]

            if updates.get("deadline") is not None:
                changes["deadline"] = self._parse_deadline(updates["deadline"])

            if updates.get("priority") is not None:
                self._validate_priority(updates["priority"])
                changes["priority"] = updates["priority"]

            if updates.get("status") is not None:
                if updates["status"] not in GOAL_STATUSES:
                    raise StateValidationError(f"Unsupported status: {updates['status']}")
                changes["status"] = updates["status"]

            # Validate everything before touching the record
            for key, value in changes.items():
                setattr(goal, key, value)

            if changes:
                self._save_to_disk()

            logger.info(
                "[STORE] Goal updated | user=%s | goal=%s | fields=%s",
                user_id,
                goal_id,
                sorted(changes),
            )
            return deepcopy(goal)

    def archive_goal(self, user_id: str, goal_id: str) -> Goal:
        return self.update_goal(user_id, goal_id, {"status": "archived"})

    # ==========================================================
    # Sessions
    # ==========================================================

    def record_session(
        self,
        user_id: str,
        *,
        topic_id: str,
        goal_id: str,
        duration_minutes: int,
        notes: str = "",
        now: datetime,
    ) -> StudySession:
        """
        Log a study session and mark its topic as reviewed at `now`.

        The topic's review count grows by one and its mastery by
        MASTERY_STEP (capped at 100).
        """
        if duration_minutes is None or duration_minutes < 0:
            raise StateValidationError("durationMinutes must be non-negative")

        with self._lock:
            state = self._state(user_id)

            goal = state.find_goal(goal_id)
            if goal is None:
                raise StateValidationError(f"Goal '{goal_id}' not found")

            topic = goal.find_topic(topic_id)
            if topic is None:
                raise StateValidationError(
                    f"Topic '{topic_id}' not found in goal '{goal_id}'"
                )

            session = StudySession(
                topic_id=topic_id,
                goal_id=goal_id,
                date=now,
                duration_minutes=duration_minutes,
                notes=notes or "",
            )
            state.sessions.append(session)

            topic.last_reviewed = to_utc(now)
            topic.review_count += 1
            topic.mastery_level = min(100, topic.mastery_level + MASTERY_STEP)

            self._save_to_disk()

        logger.info(
            "[STORE] Session recorded | user=%s | topic=%s | minutes=%d | reviews=%d",
            user_id,
            topic_id,
            duration_minutes,
            topic.review_count,
        )
        return deepcopy(session)

    def sessions(self, user_id: str) -> List[StudySession]:
        with self._lock:
            return deepcopy(self._state(user_id).sessions)

    # ==========================================================
    # Review
    # ==========================================================

    def topics_needing_review(self, user_id: str, now: datetime) -> List[Topic]:
        """Due topics of active goals, most urgent first."""
        with self._lock:
            topics = [
                t
                for g in active_goals(self._state(user_id).goals)
                for t in g.topics
            ]
            due = sort_topics_by_urgency(topics_due_for_review(topics, now), now)
            return deepcopy(due)

    # ==========================================================
    # Daily Plans
    # ==========================================================

    def save_daily_plan(self, user_id: str, plan: DailyPlan) -> DailyPlan:
        with self._lock:
            state = self._state(user_id)
            state.daily_plans = [p for p in state.daily_plans if p.date != plan.date]
            state.daily_plans.append(deepcopy(plan))
            state.last_plan_generated = plan.generated_at
            self._save_to_disk()

        logger.info(
            "[STORE] Daily plan saved | user=%s | date=%s | tasks=%d",
            user_id,
            plan.date,
            len(plan.tasks),
        )
        return plan

    def get_daily_plan(self, user_id: str, date: str) -> DailyPlan:
        with self._lock:
            for plan in self._state(user_id).daily_plans:
                if plan.date == date:
                    return deepcopy(plan)

        raise KeyError(f"No plan stored for {date}")

    # ==========================================================
    # Chat
    # ==========================================================

    def append_chat_exchange(
        self,
        user_id: str,
        message: str,
        reply: str,
        now: datetime,
    ) -> List[ChatMessage]:
        """Store one user turn and its reply; only the newest turns are kept."""
        with self._lock:
            state = self._state(user_id)
            state.chat_history.append(ChatMessage("user", message, now))
            state.chat_history.append(ChatMessage("assistant", reply, now))
            del state.chat_history[:-MAX_CHAT_HISTORY]
            self._save_to_disk()
            history = deepcopy(state.chat_history)

        logger.info(
            "[STORE] Chat exchange saved | user=%s | history=%d",
            user_id,
            len(history),
        )
        return history

    def chat_history(self, user_id: str, limit: Optional[int] = None) -> List[ChatMessage]:
        with self._lock:
            history = self._state(user_id).chat_history
            if limit is not None:
                history = history[-limit:] if limit > 0 else []
            return deepcopy(history)

    # ==========================================================
    # Observability
    # ==========================================================

    def snapshot(self, user_id: str) -> UserState:
        with self._lock:
            return deepcopy(self._state(user_id))

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    # ==========================================================
    # Internals
    # ==========================================================

    def _state(self, user_id: str) -> UserState:
        state = self._users.get(user_id)
        if state is None:
            state = UserState(user_id=user_id)
            self._users[user_id] = state
        return state

    def _require_goal(self, user_id: str, goal_id: str) -> Goal:
        goal = self._state(user_id).find_goal(goal_id)
        if goal is None:
            raise KeyError(f"Goal '{goal_id}' not found")
        return goal

    @staticmethod
    def _validate_type(goal_type: str) -> None:
        if goal_type not in GOAL_TYPES:
            raise StateValidationError(f"Unsupported goal type: {goal_type}")

    @staticmethod
    def _validate_priority(priority: int) -> None:
        if (
            isinstance(priority, bool)
            or not isinstance(priority, int)
            or not MIN_PRIORITY <= priority <= MAX_PRIORITY
        ):
            raise StateValidationError(
                f"priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}"
            )

    @staticmethod
    def _parse_deadline(value: Any):
        try:
            return parse_deadline(value)
        except (TypeError, ValueError) as e:
            raise StateValidationError(f"Invalid deadline: {e}")

    # ==========================================================
    # Persistence
    # ==========================================================

    def _save_to_disk(self) -> None:
        """
        Write the full state to a sibling temp file and swap it in, so the
        live file is always either the previous or the new snapshot.
        """
        if self._storage is None:
            return

        data = {user_id: state.to_dict() for user_id, state in self._users.items()}
        tmp_path = self._storage.with_name(self._storage.name + ".tmp")

        try:
            with tmp_path.open("w") as f:
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._storage)
        except OSError as e:
            logger.warning(f"[STORE] Failed to persist: {e}")
            tmp_path.unlink(missing_ok=True)

    def _load_from_disk(self) -> None:
        if self._storage is None or not self._storage.exists():
            return

        try:
            with self._storage.open() as f:
                data = json.load(f)

            users = {
                user_id: UserState.from_dict(entry)
                for user_id, entry in data.items()
            }

        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"[STORE] Failed to load from disk: {e}")
            self._quarantine()
            return

        self._users = users
        logger.info("[STORE] Loaded persisted state | users=%d", len(self._users))

    def _quarantine(self) -> None:
        """
        Move an unreadable state file aside so later writes cannot
        overwrite it. If that fails, persistence is switched off.
        """
        corrupt_path = self._storage.with_name(self._storage.name + ".corrupt")

        try:
            os.replace(self._storage, corrupt_path)
            logger.warning(f"[STORE] Kept unreadable state file as {corrupt_path}")
        except OSError as e:
            logger.error(f"[STORE] Could not move unreadable state file, persistence disabled: {e}")
            self._storage = None
