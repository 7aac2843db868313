from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ...core.config import TREND_RANGES, Settings
from ...core.security import resolve_current_user
from ...metrics import USER_API_COUNTER
from ...schemas.goals import (
    AddictionCreate,
    AddictionListResponse,
    AddictionModel,
    CustomGoalCreate,
    GoalListResponse,
    GoalModel,
)
from ...schemas.insights import (
    DailyResetResponse,
    DashboardStatsModel,
    InsightModel,
    MoodPointModel,
    StreakResponse,
    TrendsResponse,
    WeeklyTrendModel,
)
from ...schemas.mood import (
    ClassificationModel,
    CurrentMoodModel,
    CurrentMoodResponse,
    MoodMessageCreate,
    MoodMessageResponse,
)
from ...services.daily_reset import DailyResetScheduler
from ...services.dashboard import DashboardService
from ...services.goals import GoalNotFoundError, GoalService
from ...services.ratelimit import RateLimiter
from ...services.storage import StorageService
from ...services.tracker import MoodTracker

router = APIRouter(prefix="/api/v1", tags=["mood"])


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_storage_service(request: Request) -> StorageService:
    return request.app.state.storage_service


def get_mood_tracker(request: Request) -> MoodTracker:
    return request.app.state.mood_tracker


def get_dashboard_service(request: Request) -> DashboardService:
    return request.app.state.dashboard_service


def get_goal_service(request: Request) -> GoalService:
    return request.app.state.goal_service


def get_daily_reset(request: Request) -> DailyResetScheduler:
    return request.app.state.daily_reset


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


@router.post("/mood/messages", response_model=MoodMessageResponse)
async def post_mood_message(
    payload: MoodMessageCreate,
    tracker: MoodTracker = Depends(get_mood_tracker),
    limiter: RateLimiter = Depends(get_rate_limiter),
    settings: Settings = Depends(get_settings_from_app),
    user_id: int = Depends(resolve_current_user),
) -> MoodMessageResponse:
    key = f"mood:{user_id}"
    window = settings.message_rate_window_seconds
    if not limiter.allow(key, limit=settings.message_rate_limit, window_seconds=window):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="rate limited",
            headers={"Retry-After": str(limiter.retry_after(key, window))},
        )
    result = await tracker.process_message(
        user_id,
        payload.text,
        sentiment_hint=payload.sentiment_hint,
        ai_response=payload.ai_response,
    )
    USER_API_COUNTER.labels(endpoint="mood_messages_post").inc()
    return MoodMessageResponse(
        classification=ClassificationModel.model_validate(result.classification),
        updated=result.updated,
        previous_score=result.previous_score,
        current=CurrentMoodModel.model_validate(result.current) if result.current else None,
    )


@router.get("/mood/current", response_model=CurrentMoodResponse)
async def get_current_mood(
    storage: StorageService = Depends(get_storage_service),
    user_id: int = Depends(resolve_current_user),
) -> CurrentMoodResponse:
    current = await storage.get_current_mood(user_id)
    USER_API_COUNTER.labels(endpoint="mood_current_get").inc()
    return CurrentMoodResponse(
        current=CurrentMoodModel.model_validate(current) if current else None
    )


@router.get("/mood/trends", response_model=TrendsResponse)
async def get_mood_trends(
    dashboard: DashboardService = Depends(get_dashboard_service),
    settings: Settings = Depends(get_settings_from_app),
    user_id: int = Depends(resolve_current_user),
    range_name: str | None = Query(default=None, alias="range"),
) -> TrendsResponse:
    selected = (range_name or settings.trends_default_range).lower()
    if selected not in TREND_RANGES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"range must be one of: {', '.join(TREND_RANGES)}",
        )
    report = await dashboard.trends(user_id, selected)
    USER_API_COUNTER.labels(endpoint="mood_trends_get").inc()
    return TrendsResponse(
        range=report.range,
        start=report.start,
        end=report.end,
        series=[MoodPointModel.model_validate(point) for point in report.series],
        weekly_trends=[WeeklyTrendModel.model_validate(trend) for trend in report.weekly_trends],
        insights=[InsightModel.model_validate(insight) for insight in report.insights],
        stats=DashboardStatsModel.model_validate(report.stats),
    )


@router.get("/streak", response_model=StreakResponse)
async def get_streak(
    dashboard: DashboardService = Depends(get_dashboard_service),
    user_id: int = Depends(resolve_current_user),
) -> StreakResponse:
    report = await dashboard.streak(user_id)
    USER_API_COUNTER.labels(endpoint="streak_get").inc()
    return StreakResponse.model_validate(report)


@router.post("/daily-reset/check", response_model=DailyResetResponse)
async def check_daily_reset(
    scheduler: DailyResetScheduler = Depends(get_daily_reset),
    user_id: int = Depends(resolve_current_user),
) -> DailyResetResponse:
    performed = await scheduler.check(user_id)
    USER_API_COUNTER.labels(endpoint="daily_reset_check").inc()
    return DailyResetResponse(reset=performed, day=scheduler.today())


@router.post("/daily-reset/manual", response_model=DailyResetResponse)
async def manual_daily_reset(
    scheduler: DailyResetScheduler = Depends(get_daily_reset),
    user_id: int = Depends(resolve_current_user),
) -> DailyResetResponse:
    await scheduler.trigger_manual_reset(user_id)
    USER_API_COUNTER.labels(endpoint="daily_reset_manual").inc()
    return DailyResetResponse(reset=True, day=scheduler.today())


@router.get("/goals", response_model=GoalListResponse)
async def list_goals(
    goals: GoalService = Depends(get_goal_service),
    scheduler: DailyResetScheduler = Depends(get_daily_reset),
    user_id: int = Depends(resolve_current_user),
) -> GoalListResponse:
    items = await goals.list_goals(user_id, scheduler.today())
    USER_API_COUNTER.labels(endpoint="goals_get").inc()
    return GoalListResponse(
        items=[GoalModel.model_validate(goal) for goal in items],
        total_points=goals.planner.total_points(items),
        completed=sum(1 for goal in items if goal.completed),
    )


@router.post(
    "/goals/custom",
    response_model=GoalModel,
    status_code=status.HTTP_201_CREATED,
)
async def create_custom_goal(
    payload: CustomGoalCreate,
    goals: GoalService = Depends(get_goal_service),
    user_id: int = Depends(resolve_current_user),
) -> GoalModel:
    goal = await goals.add_custom_goal(user_id, payload.text, payload.points_value)
    USER_API_COUNTER.labels(endpoint="goals_custom_post").inc()
    return GoalModel.model_validate(goal)


@router.delete("/goals/custom/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_custom_goal(
    goal_id: str,
    goals: GoalService = Depends(get_goal_service),
    user_id: int = Depends(resolve_current_user),
) -> None:
    try:
        await goals.remove_custom_goal(user_id, goal_id)
    except GoalNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="goal not found") from exc
    USER_API_COUNTER.labels(endpoint="goals_custom_delete").inc()


@router.post("/goals/{goal_id}/complete", response_model=GoalModel)
async def complete_goal(
    goal_id: str,
    goals: GoalService = Depends(get_goal_service),
    scheduler: DailyResetScheduler = Depends(get_daily_reset),
    user_id: int = Depends(resolve_current_user),
) -> GoalModel:
    try:
        goal = await goals.complete_goal(user_id, goal_id, scheduler.today())
    except GoalNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="goal not found") from exc
    USER_API_COUNTER.labels(endpoint="goals_complete_post").inc()
    return GoalModel.model_validate(goal)


@router.post(
    "/addictions",
    response_model=AddictionModel,
    status_code=status.HTTP_201_CREATED,
)
async def create_addiction(
    payload: AddictionCreate,
    storage: StorageService = Depends(get_storage_service),
    user_id: int = Depends(resolve_current_user),
) -> AddictionModel:
    entry = await storage.add_addiction(user_id, payload.name.strip(), payload.quit_date)
    USER_API_COUNTER.labels(endpoint="addictions_post").inc()
    return AddictionModel.model_validate(entry)


@router.get("/addictions", response_model=AddictionListResponse)
async def list_addictions(
    storage: StorageService = Depends(get_storage_service),
    user_id: int = Depends(resolve_current_user),
) -> AddictionListResponse:
    entries = await storage.list_addictions(user_id)
    USER_API_COUNTER.labels(endpoint="addictions_get").inc()
    return AddictionListResponse(
        items=[AddictionModel.model_validate(entry) for entry in entries]
    )
