"""FastAPI router for the business onboarding wizard."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, Field

from bizdir.businesses.errors import PersistenceError
from bizdir.onboarding.controller import WizardController
from bizdir.onboarding.errors import StepNotFoundError
from bizdir.onboarding.models import RedirectError, ValidationFailure, WizardSession
from bizdir.onboarding.session import (
    SessionStore,
    clear_wizard_session,
    load_wizard_session,
    save_wizard_session,
)

router = APIRouter(prefix="/onboard")

FLASH_ERROR = "flash_error"
FLASH_SUCCESS = "flash_success"
LAST_SUBMISSION = "last_submission"

SUBMIT_FAILED_MESSAGE = "Something went wrong. Please try again."
SUBMIT_SUCCESS_MESSAGE = "Business submitted for review!"


# --- Response models ---


class StepResponse(BaseModel):
    step: int
    title: str
    description: str
    total_steps: int
    progress: int
    fields: list[dict[str, Any]]
    data: dict[str, Any] = Field(default_factory=dict)
    notice: str | None = None


class ReviewResponse(BaseModel):
    steps: dict[int, dict[str, Any]]
    titles: dict[int, str]
    record: dict[str, Any]
    progress: int


class SuccessResponse(BaseModel):
    message: str
    business_slug: str | None = None
    status: str | None = None


# --- Helpers ---


def _controller(request: Request) -> WizardController:
    return request.app.state.wizard_controller


def _store(request: Request) -> SessionStore:
    return request.app.state.session_store


def _load(request: Request) -> WizardSession:
    return load_wizard_session(
        _store(request), request.state.session_id, _controller(request).total_steps
    )


def _save(request: Request, session: WizardSession) -> None:
    save_wizard_session(
        _store(request), request.state.session_id, session, _controller(request).total_steps
    )


def _see_other(path: str) -> RedirectResponse:
    return RedirectResponse(path, status_code=303)


def _step_path(step: int) -> str:
    return f"/onboard/step/{step}"


def _follow(request: Request, redirect: RedirectError) -> RedirectResponse:
    _store(request).put(request.state.session_id, FLASH_ERROR, redirect.notice)
    return _see_other(_step_path(redirect.target))


async def _read_submission(request: Request) -> dict[str, Any]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        body = await request.json()
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Expected a JSON object of fields")
        return body
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


# --- Wizard endpoints ---


@router.get("", response_model=None)
async def start(request: Request) -> RedirectResponse:
    return _see_other(_step_path(1))


@router.get("/schema")
async def schema(request: Request) -> list[dict[str, Any]]:
    """Field hints for every step, for client-side validation."""
    registry = _controller(request).registry
    return [
        {
            "step": s.step_number,
            "title": s.title,
            "fields": registry.field_hints(s.step_number),
        }
        for s in registry.steps
    ]


@router.get("/step/{step}", response_model=None)
async def show_step(step: int, request: Request) -> StepResponse | RedirectResponse:
    controller = _controller(request)
    try:
        view = controller.enter_step(_load(request), step)
    except StepNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.args[0])

    if isinstance(view, RedirectError):
        return _follow(request, view)

    return StepResponse(
        step=view.step.step_number,
        title=view.step.title,
        description=view.step.description,
        total_steps=view.total_steps,
        progress=view.progress,
        fields=view.fields,
        data=view.data,
        notice=_store(request).pull(request.state.session_id, FLASH_ERROR),
    )


@router.post("/step/{step}", response_model=None)
async def submit_step(step: int, request: Request) -> JSONResponse | RedirectResponse:
    controller = _controller(request)
    submitted = await _read_submission(request)
    try:
        session, outcome = controller.submit_step(_load(request), step, submitted)
    except StepNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.args[0])

    if isinstance(outcome, RedirectError):
        return _follow(request, outcome)

    if isinstance(outcome, ValidationFailure):
        return JSONResponse(
            status_code=422,
            content={
                "step": outcome.step,
                "errors": outcome.errors,
                "data": outcome.submitted,
            },
        )

    _save(request, session)
    if outcome.to_review:
        return _see_other("/onboard/review")
    return _see_other(_step_path(outcome.next_step))


@router.get("/review", response_model=None)
async def review(request: Request) -> ReviewResponse | RedirectResponse:
    view = _controller(request).enter_review(_load(request))
    if isinstance(view, RedirectError):
        return _follow(request, view)
    return ReviewResponse(
        steps=view.steps,
        titles=view.titles,
        record=view.record,
        progress=view.progress,
    )


@router.post("/submit", response_model=None)
async def submit(request: Request) -> RedirectResponse:
    controller = _controller(request)
    try:
        _, outcome = await controller.submit_final(_load(request))
    except PersistenceError:
        raise HTTPException(status_code=503, detail=SUBMIT_FAILED_MESSAGE)

    if isinstance(outcome, RedirectError):
        return _follow(request, outcome)

    store = _store(request)
    session_id = request.state.session_id
    clear_wizard_session(store, session_id, controller.total_steps)
    store.put(session_id, FLASH_SUCCESS, SUBMIT_SUCCESS_MESSAGE)
    store.put(session_id, LAST_SUBMISSION, outcome.model_dump())
    return _see_other("/onboard/success")


@router.get("/success", response_model=None)
async def success(request: Request) -> SuccessResponse | RedirectResponse:
    store = _store(request)
    message = store.pull(request.state.session_id, FLASH_SUCCESS)
    submission = store.pull(request.state.session_id, LAST_SUBMISSION)
    if message is None:
        return _see_other(_step_path(1))
    return SuccessResponse(
        message=message,
        business_slug=(submission or {}).get("business_slug"),
        status=(submission or {}).get("status"),
    )


@router.post("/abandon", response_model=None)
async def abandon(request: Request) -> RedirectResponse:
    controller = _controller(request)
    session = controller.abandon(_load(request))
    _save(request, session)
    return _see_other(_step_path(1))
