import logging
import re
from datetime import date as date_type, datetime, timezone
from typing import Callable, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from studyplanner.config import PlannerConfig
from studyplanner.planner import PlanGenerationError
from studyplanner.scheduling import to_utc
from studyplanner.server.app_core import ChatUnavailableError, StudyPlannerApp
from studyplanner.store import StateValidationError

# ============================================================
# LOGGING
# ============================================================

logger = logging.getLogger("studyplanner.server")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

DEFAULT_USER = "default-user"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# Models
# ============================================================

class CreateGoalRequest(BaseModel):
    title: str
    type: str
    deadline: str
    priority: int
    topics: List[str] = []


class UpdateGoalRequest(BaseModel):
    title: Optional[str] = None
    type: Optional[str] = None
    deadline: Optional[str] = None
    priority: Optional[int] = None
    status: Optional[str] = None


class RecordSessionRequest(BaseModel):
    topicId: str
    goalId: str
    durationMinutes: int
    notes: Optional[str] = ""


class GeneratePlanRequest(BaseModel):
    date: Optional[str] = None


class ChatRequest(BaseModel):
    message: Optional[str] = None


# ============================================================
# Helpers
# ============================================================

def get_user_id(
    x_user_id: Optional[str] = Header(default=None),
    user_id: Optional[str] = Query(default=None, alias="userId"),
) -> str:
    return x_user_id or user_id or DEFAULT_USER


def validate_plan_date(value: str) -> str:
    if not DATE_PATTERN.match(value):
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")
    try:
        date_type.fromisoformat(value)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")
    return value


# ============================================================
# FastAPI App
# ============================================================

def create_app(
    planner_app: Optional[StudyPlannerApp] = None,
    clock: Callable[[], datetime] = utc_now,
) -> FastAPI:
    """
    Build the HTTP API around a StudyPlannerApp.

    `clock` is the only place the server reads the time; every request
    evaluates decay and urgency against a single reading of it.
    """

    if planner_app is None:
        planner_app = StudyPlannerApp.create(PlannerConfig.from_env())

    app = FastAPI(title="StudyPlanner", version="1.0")
    app.state.planner_app = planner_app

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-User-Id"],
    )

    store = planner_app.store

    # ============================================================
    # Health
    # ============================================================

    @app.get("/")
    def health():
        return {
            "status": "ok",
            "message": "Study Planner is running",
            "planner": planner_app.planner.name,
        }

    # ============================================================
    # Goals
    # ============================================================

    @app.post("/api/goals", status_code=status.HTTP_201_CREATED)
    def create_goal(request: CreateGoalRequest, user_id: str = Depends(get_user_id)):
        try:
            goal = store.create_goal(
                user_id,
                title=request.title,
                type=request.type,
                deadline=request.deadline,
                priority=request.priority,
                topics=request.topics,
                now=clock(),
            )
            return goal.to_dict()

        except StateValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

        except Exception:
            logger.exception("[API] Create goal failed")
            raise HTTPException(status_code=500, detail="Internal server error")

    @app.get("/api/goals")
    def list_goals(user_id: str = Depends(get_user_id)):
        try:
            return {"goals": planner_app.goals_with_decay(user_id, clock())}
        except Exception:
            logger.exception("[API] Get goals failed")
            raise HTTPException(status_code=500, detail="Internal server error")

    @app.put("/api/goals/{goal_id}")
    def update_goal(
        goal_id: str,
        request: UpdateGoalRequest,
        user_id: str = Depends(get_user_id),
    ):
        try:
            goal = store.update_goal(user_id, goal_id, request.model_dump(exclude_none=True))
            return goal.to_dict()

        except KeyError:
            raise HTTPException(status_code=404, detail="Goal not found")

        except StateValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

        except Exception:
            logger.exception("[API] Update goal failed")
            raise HTTPException(status_code=500, detail="Internal server error")

    @app.delete("/api/goals/{goal_id}")
    def archive_goal(goal_id: str, user_id: str = Depends(get_user_id)):
        try:
            store.archive_goal(user_id, goal_id)
            return {"success": True}

        except KeyError:
            raise HTTPException(status_code=404, detail="Goal not found")

        except Exception:
            logger.exception("[API] Delete goal failed")
            raise HTTPException(status_code=500, detail="Internal server error")

    # ============================================================
    # Sessions
    # ============================================================

    @app.post("/api/sessions", status_code=status.HTTP_201_CREATED)
    def record_session(request: RecordSessionRequest, user_id: str = Depends(get_user_id)):
        try:
            session = store.record_session(
                user_id,
                topic_id=request.topicId,
                goal_id=request.goalId,
                duration_minutes=request.durationMinutes,
                notes=request.notes or "",
                now=clock(),
            )
            return session.to_dict()

        except StateValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

        except Exception:
            logger.exception("[API] Record session failed")
            raise HTTPException(status_code=500, detail="Internal server error")

    # ============================================================
    # Daily Plan
    # ============================================================

    @app.get("/api/plan/{plan_date}")
    def get_plan(plan_date: str, user_id: str = Depends(get_user_id)):
        validate_plan_date(plan_date)

        try:
            return store.get_daily_plan(user_id, plan_date).to_dict()
        except KeyError:
            raise HTTPException(status_code=404, detail="Plan not found for this date")

    @app.post("/api/plan/generate", status_code=status.HTTP_201_CREATED)
    def generate_plan(
        request: Optional[GeneratePlanRequest] = None,
        user_id: str = Depends(get_user_id),
    ):
        now = clock()
        plan_date = validate_plan_date(
            (request.date if request else None) or now.date().isoformat()
        )

        try:
            plan = planner_app.generate_plan(user_id, plan_date, now)
            return plan.to_dict()

        except PlanGenerationError as e:
            raise HTTPException(status_code=400, detail=str(e))

        except Exception:
            logger.exception("[API] Generate plan failed")
            raise HTTPException(status_code=500, detail="Internal server error")

    # ============================================================
    # Review
    # ============================================================

    @app.get("/api/review")
    def review_topics(
        as_of_date: Optional[str] = Query(default=None, alias="asOfDate"),
        user_id: str = Depends(get_user_id),
    ):
        if as_of_date:
            try:
                now = to_utc(as_of_date)
            except (TypeError, ValueError):
                raise HTTPException(status_code=400, detail="Invalid asOfDate")
        else:
            now = clock()

        try:
            return planner_app.topics_needing_review(user_id, now)
        except Exception:
            logger.exception("[API] Get review topics failed")
            raise HTTPException(status_code=500, detail="Internal server error")

    # ============================================================
    # Study Chat
    # ============================================================

    @app.post("/api/chat")
    def chat(request: ChatRequest, user_id: str = Depends(get_user_id)):
        message = (request.message or "").strip()
        if not message:
            raise HTTPException(status_code=400, detail="message is required (string)")

        try:
            reply = planner_app.chat(user_id, message, clock())
            return {"response": reply.content, "createdAt": reply.created_at.isoformat()}

        except ChatUnavailableError as e:
            raise HTTPException(status_code=503, detail=str(e))

        except Exception:
            logger.exception("[API] Chat failed")
            raise HTTPException(status_code=500, detail="Chat request failed")

    @app.get("/api/chat/history")
    def chat_history(
        limit: Optional[int] = Query(default=None, ge=0),
        user_id: str = Depends(get_user_id),
    ):
        return {"messages": planner_app.chat_history(user_id, limit)}

    return app
