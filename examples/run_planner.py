from datetime import datetime, timedelta, timezone

from studyplanner.config import PlannerConfig
from studyplanner.server.app_core import StudyPlannerApp

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

USER = "demo-user"

# --------------------------------
# Planner (rule-based, in-memory)
# --------------------------------

app = StudyPlannerApp.create(PlannerConfig(planner_type="rule"))
store = app.store

start = datetime(2024, 1, 1, tzinfo=timezone.utc)

# --------------------------------
# Goals
# --------------------------------

calculus = store.create_goal(
    USER,
    title="Calculus final",
    type="exam",
    deadline="2024-01-25",
    priority=5,
    topics=["Limits", "Derivatives", "Integrals"],
    now=start,
)

store.create_goal(
    USER,
    title="History essay",
    type="project",
    deadline="2024-03-01",
    priority=2,
    topics=["Outline", "Sources"],
    now=start,
)

# --------------------------------
# Two weeks of study
# --------------------------------

limits, derivatives, _ = calculus.topics

for day in (0, 1, 4, 11):
    store.record_session(
        USER,
        topic_id=limits.id,
        goal_id=calculus.id,
        duration_minutes=30,
        now=start + timedelta(days=day),
    )

store.record_session(
    USER,
    topic_id=derivatives.id,
    goal_id=calculus.id,
    duration_minutes=45,
    now=start + timedelta(days=3),
)

now = start + timedelta(days=14)

print("\n=== Goals by urgency ===\n")
for goal in app.goals_with_decay(USER, now):
    print(f"{goal['urgencyScore']:>3}  {goal['title']}")
    for topic in goal["topics"]:
        print(
            f"       {topic['decayLevel']:<7} {topic['name']:<12} "
            f"reviews={topic['reviewCount']} next={topic['nextReview']}"
        )

print("\n=== Needs review ===\n")
for topic in app.topics_needing_review(USER, now):
    print(f"{topic['urgencyScore']:>3}  {topic['name']}")

print("\n=== Daily plan ===\n")
plan = app.generate_plan(USER, now.date().isoformat(), now)
print(plan.reasoning)
for task in plan:
    print(f"- {task.type:<8} {task.estimated_minutes}m  {task.reasoning}")
