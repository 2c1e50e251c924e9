import json
from datetime import date, timedelta

import pytest

from studyplanner.models import DailyPlan, PlannedTask
from studyplanner.store import StateValidationError, UserStateStore

from conftest import NOW

USER = "alice"


@pytest.fixture
def store():
    return UserStateStore()


def create_goal(store, user=USER, **overrides):
    fields = dict(
        title="Calculus final",
        type="exam",
        deadline="2024-02-01",
        priority=4,
        topics=["Limits", "Derivatives"],
        now=NOW,
    )
    fields.update(overrides)
    return store.create_goal(user, **fields)


# ------------------------------------------------------------
# Goals
# ------------------------------------------------------------

def test_create_goal_starts_topics_unreviewed(store):
    goal = create_goal(store)

    assert goal.status == "active"
    assert goal.deadline == date(2024, 2, 1)
    assert goal.created_at == NOW
    assert [t.name for t in goal.topics] == ["Limits", "Derivatives"]
    for topic in goal.topics:
        assert topic.goal_id == goal.id
        assert topic.last_reviewed is None
        assert topic.review_count == 0
        assert topic.mastery_level == 0


def test_topic_names_are_trimmed_and_blanks_skipped(store):
    goal = create_goal(store, topics=[" Limits ", "  ", "", "Series\t"])
    assert [t.name for t in goal.topics] == ["Limits", "Series"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"priority": 0},
        {"priority": 6},
        {"type": "hobby"},
        {"title": ""},
        {"deadline": "next week"},
    ],
)
def test_create_goal_rejects_invalid_input(store, overrides):
    with pytest.raises(StateValidationError):
        create_goal(store, **overrides)


def test_users_are_isolated(store):
    create_goal(store, user="alice")
    assert store.list_goals("bob") == []
    assert len(store.list_goals("alice")) == 1


def test_returned_goals_are_copies(store):
    goal = create_goal(store)
    goal.title = "changed"
    goal.topics[0].review_count = 99

    stored = store.get_goal(USER, goal.id)
    assert stored.title == "Calculus final"
    assert stored.topics[0].review_count == 0


def test_update_goal_applies_partial_changes(store):
    goal = create_goal(store)

    updated = store.update_goal(USER, goal.id, {"priority": 2, "deadline": "2024-03-01", "id": "ignored"})

    assert updated.id == goal.id
    assert updated.priority == 2
    assert updated.deadline == date(2024, 3, 1)
    assert updated.title == goal.title


def test_update_goal_validates_before_writing(store):
    goal = create_goal(store)

    with pytest.raises(StateValidationError):
        store.update_goal(USER, goal.id, {"title": "New", "priority": 10})

    assert store.get_goal(USER, goal.id).title == "Calculus final"


def test_update_unknown_goal_raises_key_error(store):
    with pytest.raises(KeyError):
        store.update_goal(USER, "missing", {"title": "x"})


def test_archived_goals_are_hidden_from_active_list(store):
    goal = create_goal(store)

    store.archive_goal(USER, goal.id)

    assert store.list_goals(USER) == []
    assert store.list_goals(USER, include_inactive=True)[0].status == "archived"


# ------------------------------------------------------------
# Sessions
# ------------------------------------------------------------

def test_record_session_marks_topic_reviewed(store):
    goal = create_goal(store)
    topic = goal.topics[0]

    session = store.record_session(
        USER, topic_id=topic.id, goal_id=goal.id, duration_minutes=45, notes="chapter 2", now=NOW
    )

    assert session.date == NOW
    assert session.duration_minutes == 45

    stored = store.get_goal(USER, goal.id).find_topic(topic.id)
    assert stored.last_reviewed == NOW
    assert stored.review_count == 1
    assert stored.mastery_level == 10


def test_review_count_only_grows(store):
    goal = create_goal(store)
    topic = goal.topics[0]

    for day in range(12):
        store.record_session(
            USER, topic_id=topic.id, goal_id=goal.id, duration_minutes=10,
            now=NOW + timedelta(days=day),
        )

    stored = store.get_goal(USER, goal.id).find_topic(topic.id)
    assert stored.review_count == 12
    assert stored.mastery_level == 100
    assert len(store.sessions(USER)) == 12


@pytest.mark.parametrize(
    "topic_id, goal_id, minutes",
    [("missing", None, 10), (None, "missing", 10), (None, None, -5)],
)
def test_record_session_rejects_invalid_input(store, topic_id, goal_id, minutes):
    goal = create_goal(store)

    with pytest.raises(StateValidationError):
        store.record_session(
            USER,
            topic_id=topic_id or goal.topics[0].id,
            goal_id=goal_id or goal.id,
            duration_minutes=minutes,
            now=NOW,
        )


# ------------------------------------------------------------
# Review
# ------------------------------------------------------------

def test_topics_needing_review_are_sorted_and_filtered(store):
    goal = create_goal(store, topics=["Limits", "Derivatives", "Integrals"])
    limits, derivatives, _ = goal.topics

    # Limits: reviewed now, next review in three days
    store.record_session(USER, topic_id=limits.id, goal_id=goal.id, duration_minutes=20, now=NOW)
    # Derivatives: reviewed five days ago, overdue
    store.record_session(
        USER, topic_id=derivatives.id, goal_id=goal.id, duration_minutes=20,
        now=NOW - timedelta(days=5),
    )

    due = store.topics_needing_review(USER, NOW)

    # Never-reviewed Integrals (red, no mastery) outranks Derivatives
    assert [t.name for t in due] == ["Integrals", "Derivatives"]


def test_topics_needing_review_respects_reference_time(store):
    goal = create_goal(store, topics=["Limits"])
    store.record_session(USER, topic_id=goal.topics[0].id, goal_id=goal.id, duration_minutes=20, now=NOW)

    assert store.topics_needing_review(USER, NOW) == []
    assert store.topics_needing_review(USER, NOW + timedelta(days=2, hours=23)) == []
    assert len(store.topics_needing_review(USER, NOW + timedelta(days=3))) == 1


def test_inactive_goal_topics_are_not_reviewed(store):
    goal = create_goal(store)
    store.update_goal(USER, goal.id, {"status": "completed"})

    assert store.topics_needing_review(USER, NOW) == []


# ------------------------------------------------------------
# Daily plans
# ------------------------------------------------------------

def make_plan(day="2024-01-15", reasoning="plan"):
    return DailyPlan(
        date=day,
        generated_at=NOW,
        tasks=[PlannedTask(topic_id="t", goal_id="g", type="review", estimated_minutes=30)],
        reasoning=reasoning,
    )


def test_daily_plan_round_trip(store):
    store.save_daily_plan(USER, make_plan())

    plan = store.get_daily_plan(USER, "2024-01-15")

    assert plan.reasoning == "plan"
    assert store.snapshot(USER).last_plan_generated == NOW


def test_saving_a_plan_replaces_the_same_day(store):
    store.save_daily_plan(USER, make_plan(reasoning="first"))
    store.save_daily_plan(USER, make_plan(reasoning="second"))

    assert store.get_daily_plan(USER, "2024-01-15").reasoning == "second"
    assert len(store.snapshot(USER).daily_plans) == 1


def test_missing_plan_raises_key_error(store):
    with pytest.raises(KeyError):
        store.get_daily_plan(USER, "2024-01-16")


# ------------------------------------------------------------
# Persistence
# ------------------------------------------------------------

def test_state_survives_restart(tmp_path):
    path = tmp_path / "state.json"

    first = UserStateStore(storage_path=str(path))
    goal = create_goal(first)
    first.record_session(USER, topic_id=goal.topics[0].id, goal_id=goal.id, duration_minutes=25, now=NOW)
    first.save_daily_plan(USER, make_plan())

    second = UserStateStore(storage_path=str(path))

    restored = second.get_goal(USER, goal.id)
    assert restored.deadline == date(2024, 2, 1)
    assert restored.topics[0].last_reviewed == NOW
    assert restored.topics[0].review_count == 1
    assert len(second.sessions(USER)) == 1
    assert second.get_daily_plan(USER, "2024-01-15").tasks[0].type == "review"


def test_unreadable_state_file_is_kept_aside(tmp_path):
    path = tmp_path / "state.json"

    first = UserStateStore(storage_path=str(path))
    create_goal(first, user="alice")
    text = path.read_text()
    path.write_text(text[: len(text) // 2])

    second = UserStateStore(storage_path=str(path))
    assert len(second) == 0

    create_goal(second, user="bob")

    corrupt = tmp_path / "state.json.corrupt"
    assert corrupt.read_text() == text[: len(text) // 2]
    assert list(json.loads(path.read_text())) == ["bob"]


def test_partially_invalid_state_loads_nothing(tmp_path):
    path = tmp_path / "state.json"

    first = UserStateStore(storage_path=str(path))
    create_goal(first, user="alice")
    data = json.loads(path.read_text())
    data["bob"] = {"goals": []}
    path.write_text(json.dumps(data))

    second = UserStateStore(storage_path=str(path))

    assert len(second) == 0
    assert (tmp_path / "state.json.corrupt").exists()
    assert not path.exists()


def test_save_replaces_file_without_leftovers(tmp_path):
    path = tmp_path / "state.json"

    store = UserStateStore(storage_path=str(path))
    create_goal(store, user="alice")
    create_goal(store, user="bob")

    assert sorted(json.loads(path.read_text())) == ["alice", "bob"]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["state.json"]


# ------------------------------------------------------------
# Chat history
# ------------------------------------------------------------

def test_chat_exchange_is_stored_per_user(store):
    history = store.append_chat_exchange(USER, "What now?", "Review Limits.", NOW)

    assert [(m.role, m.content) for m in history] == [
        ("user", "What now?"),
        ("assistant", "Review Limits."),
    ]
    assert history[0].created_at == NOW
    assert store.chat_history("bob") == []


def test_chat_history_keeps_newest_messages(store, monkeypatch):
    monkeypatch.setattr("studyplanner.store.user_state_store.MAX_CHAT_HISTORY", 4)

    for i in range(3):
        store.append_chat_exchange(USER, f"q{i}", f"a{i}", NOW)

    assert [m.content for m in store.chat_history(USER)] == ["q1", "a1", "q2", "a2"]
    assert [m.content for m in store.chat_history(USER, limit=1)] == ["a2"]
    assert store.chat_history(USER, limit=0) == []


def test_chat_history_survives_restart(tmp_path):
    path = tmp_path / "state.json"

    UserStateStore(storage_path=str(path)).append_chat_exchange(USER, "hi", "hello", NOW)

    restored = UserStateStore(storage_path=str(path)).chat_history(USER)
    assert [(m.role, m.content, m.created_at) for m in restored] == [
        ("user", "hi", NOW),
        ("assistant", "hello", NOW),
    ]
