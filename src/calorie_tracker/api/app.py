"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from calorie_tracker.api.models import ImageAnalysisRequest
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.errors import ProfileMissingError, RecognitionError
from calorie_tracker.domain.food import FoodCandidate, FoodEntry
from calorie_tracker.domain.nutrition import MacroProgress, round_half_up
from calorie_tracker.domain.portions import (
    Decision,
    ExcessWarning,
    LimitReached,
    NormalAdd,
    PerfectAdjustedFit,
    PerfectFit,
)
from calorie_tracker.domain.profile import Profile
from calorie_tracker.services.tracker import DashboardSummary

_RECOGNITION_STATUS = {
    "missing_credentials": status.HTTP_503_SERVICE_UNAVAILABLE,
    "image_too_large": 413,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ProfileMissingError)
    async def profile_missing(
        request: Request, exc: ProfileMissingError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Profile not found", "redirect": "/onboarding"},
        )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Rejected input may hold non-finite floats that JSON cannot carry.
        errors = [
            {key: value for key, value in error.items() if key not in {"input", "ctx"}}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=422,
            content={"detail": jsonable_encoder(errors)},
        )

    @app.exception_handler(RecognitionError)
    async def recognition_failed(
        request: Request, exc: RecognitionError
    ) -> JSONResponse:
        logger.error(
            "Error analyzing image: reason=%s status=%s", exc.reason, exc.status_code
        )
        return JSONResponse(
            status_code=_RECOGNITION_STATUS.get(
                exc.reason, status.HTTP_502_BAD_GATEWAY
            ),
            content={"detail": "Error analyzing image", "message": exc.message},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the stored profile and its daily goal."""
        tracker = _container(request).tracker_service
        return _profile_payload(tracker.require_profile(), tracker.daily_goal())

    @app.put("/profile")
    async def put_profile(profile: Profile, request: Request) -> dict[str, object]:
        """Save onboarding data, replacing any previous profile."""
        tracker = _container(request).tracker_service
        saved = tracker.onboard(profile)
        return _profile_payload(saved, tracker.daily_goal())

    @app.get("/dashboard")
    async def dashboard(request: Request) -> dict[str, object]:
        """Return today's totals, remaining budget and entries."""
        summary = _container(request).tracker_service.dashboard()
        return _dashboard_payload(summary)

    @app.post("/foods/analyze")
    async def analyze_food(
        payload: ImageAnalysisRequest, request: Request
    ) -> dict[str, object]:
        """Recognize the food in a photo and advise on the portion."""
        try:
            image_bytes = payload.image_bytes()
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        tracker = _container(request).tracker_service
        candidate, decision = await tracker.analyze_image(image_bytes)
        logger.info("Food analyzed successfully: %s", candidate.name)
        return {
            "candidate": candidate.model_dump(),
            "decision": _decision_payload(decision),
        }

    @app.post("/foods/evaluate")
    async def evaluate_food(
        candidate: FoodCandidate, request: Request
    ) -> dict[str, object]:
        """Advise on a manually entered food."""
        decision = _container(request).tracker_service.evaluate(candidate)
        return {"decision": _decision_payload(decision)}

    @app.post("/entries")
    async def add_entry(
        candidate: FoodCandidate, request: Request
    ) -> dict[str, object]:
        """Log a food. Incomplete foods are ignored."""
        entry = _container(request).tracker_service.log_food(candidate)
        if entry is None:
            return {"status": "ignored"}
        return {"status": "ok", "entry": _entry_payload(entry)}

    @app.delete("/entries/{timestamp}")
    async def delete_entry(timestamp: int, request: Request) -> dict[str, str]:
        """Delete a logged entry."""
        _container(request).tracker_service.delete_entry(timestamp)
        return {"status": "ok"}

    @app.post("/entries/reset-today")
    async def reset_today(request: Request) -> dict[str, str]:
        """Delete every entry logged today."""
        _container(request).tracker_service.reset_today()
        return {"status": "ok"}

    @app.post("/reset")
    async def factory_reset(request: Request) -> dict[str, str]:
        """Delete all entries and the profile."""
        _container(request).tracker_service.factory_reset()
        return {"status": "ok", "redirect": "/onboarding"}

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _profile_payload(profile: Profile, daily_goal: int) -> dict[str, object]:
    return {
        "profile": profile.model_dump(mode="json", by_alias=True),
        "daily_goal": daily_goal,
    }


def _entry_payload(entry: FoodEntry) -> dict[str, object]:
    return entry.model_dump()


def _macro_payload(progress: MacroProgress) -> dict[str, float]:
    return {
        "consumed": round(progress.consumed, 1),
        "target": round(progress.target, 1),
        "percent": round(progress.percent, 1),
    }


def _dashboard_payload(summary: DashboardSummary) -> dict[str, object]:
    return {
        "profile": summary.profile.model_dump(mode="json", by_alias=True),
        "daily_goal": summary.daily_goal,
        "consumed": summary.totals.calories,
        "remaining": summary.remaining_display,
        "over_goal": summary.remaining < 0,
        "progress_percent": round_half_up(summary.progress_percent),
        "macros": {
            "protein": _macro_payload(summary.macros.protein),
            "carbs": _macro_payload(summary.macros.carbs),
            "fat": _macro_payload(summary.macros.fat),
        },
        "entries": [_entry_payload(entry) for entry in summary.entries],
    }


def _decision_payload(decision: Decision | None) -> dict[str, object] | None:
    if decision is None:
        return None
    payload: dict[str, object] = {
        "kind": str(decision.kind),
        "remaining": decision.remaining,
        "message": _decision_message(decision),
        "options": [option.model_dump() for option in decision.options],
    }
    if isinstance(decision, PerfectAdjustedFit | ExcessWarning):
        payload["portion_percent"] = decision.portion_percent
    if isinstance(decision, LimitReached):
        payload["exceed_percent"] = round(decision.exceed_percent, 1)
    if isinstance(decision, NormalAdd):
        payload["goal_percent"] = round(decision.goal_percent, 1)
    return payload


def _decision_message(decision: Decision) -> str:
    name = decision.candidate.name
    if isinstance(decision, PerfectFit):
        return f"{name} completes your daily goal!"
    if isinstance(decision, PerfectAdjustedFit):
        return (
            f"{decision.portion_percent:.1f}% of {name} "
            f"({decision.suggested.calories} kcal) completes your daily goal!"
        )
    if isinstance(decision, ExcessWarning):
        return (
            f"{name} has {decision.candidate.calories} kcal but only "
            f"{decision.remaining} kcal remain. Suggested portion: "
            f"{decision.portion_percent:.1f}%."
        )
    if isinstance(decision, LimitReached):
        return (
            "Daily goal reached. Adding "
            f"{name} would exceed it by {decision.exceed_percent:.0f}%."
        )
    return f"{name} brings you to {decision.goal_percent:.0f}% of your daily goal."
