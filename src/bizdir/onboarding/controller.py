"""Onboarding wizard state machine.

The controller holds no per-visitor state. Every operation receives the
visitor's WizardSession and, where something changes, returns a new one
for the caller to save; the session passed in is never mutated.

A visitor may open step ``n`` only once steps ``1..n-1`` all have data.
Going back to an earlier step keeps the data of later steps until they
are submitted again.
"""

from __future__ import annotations

import logging
from typing import Any

from bizdir.businesses.errors import PersistenceError
from bizdir.businesses.materializer import RecordMaterializer
from bizdir.core.types import TelemetryEvent
from bizdir.onboarding.models import (
    NextStepTransition,
    RedirectError,
    ReviewView,
    StepView,
    SubmittedConfirmation,
    ValidationFailure,
    WizardSession,
)
from bizdir.onboarding.records import PendingRecord
from bizdir.onboarding.registry import StepRegistry
from bizdir.telemetry.sink import NullTelemetrySink, TelemetrySink

logger = logging.getLogger(__name__)

ORDERING_NOTICE = "Please complete the previous steps first."

StepResult = NextStepTransition | ValidationFailure | RedirectError


class WizardController:
    """Decides which step a visitor may see, and what a submission does.

    Args:
        registry: The step schema registry.
        materializer: Creates the business on final submission.
        telemetry: Optional sink for best-effort events. A failing sink
            is logged and otherwise ignored.
    """

    def __init__(
        self,
        registry: StepRegistry,
        materializer: RecordMaterializer,
        telemetry: TelemetrySink | None = None,
    ) -> None:
        self._registry = registry
        self._materializer = materializer
        self._telemetry = telemetry or NullTelemetrySink()

    @property
    def registry(self) -> StepRegistry:
        return self._registry

    @property
    def total_steps(self) -> int:
        return self._registry.total_steps

    def progress_for(self, step: int) -> int:
        """Percentage shown once ``step`` is complete."""
        return round(100 * step / self.total_steps)

    # -- Guards --

    def _ordering_guard(self, session: WizardSession, step: int) -> RedirectError | None:
        missing = session.lowest_missing(step - 1)
        if missing is None:
            return None
        return RedirectError(target=missing, notice=ORDERING_NOTICE)

    def _completeness_guard(self, session: WizardSession) -> RedirectError | None:
        missing = session.lowest_missing(self.total_steps)
        if missing is None:
            return None
        return RedirectError(target=missing, notice=ORDERING_NOTICE)

    # -- Operations --

    def enter_step(self, session: WizardSession, step: int) -> StepView | RedirectError:
        """Open ``step``, pre-filled with any data saved for it earlier.

        Raises:
            StepNotFoundError: If ``step`` is not a step of this wizard.
        """
        definition = self._registry.get_step(step)

        redirect = self._ordering_guard(session, step)
        if redirect is not None:
            self._emit(session, "onboarding.ordering_redirect", {
                "requested_step": step,
                "target_step": redirect.target,
            })
            return redirect

        highest = session.highest_completed
        if step <= highest:
            self._emit(session, "onboarding.back_navigation", {
                "from_step": highest,
                "to_step": step,
            })
        self._emit(session, "onboarding.step_started", {"step": step})

        return StepView(
            step=definition,
            data=dict(session.step_data.get(step, {})),
            progress=session.progress,
            total_steps=self.total_steps,
            fields=self._registry.field_hints(step),
        )

    def submit_step(
        self, session: WizardSession, step: int, submitted: dict[str, Any]
    ) -> tuple[WizardSession, StepResult]:
        """Validate and store the data for ``step``.

        On success the step's data is replaced as a whole and the other
        steps are left alone. On failure the session comes back unchanged.

        Raises:
            StepNotFoundError: If ``step`` is not a step of this wizard.
        """
        self._registry.get_step(step)

        redirect = self._ordering_guard(session, step)
        if redirect is not None:
            self._emit(session, "onboarding.ordering_redirect", {
                "requested_step": step,
                "target_step": redirect.target,
            })
            return session, redirect

        result = self._registry.validate(step, submitted)
        if not result.valid:
            self._emit(session, "onboarding.validation_failed", {
                "step": step,
                "fields": sorted(result.errors),
                "error_count": sum(len(v) for v in result.errors.values()),
            })
            return session, ValidationFailure(
                step=step,
                errors=result.errors,
                submitted=dict(submitted),
            )

        record = self._registry.parse_record(step, result.cleaned)
        data = record if isinstance(record, dict) else record.as_session_data()

        step_data = {k: dict(v) for k, v in session.step_data.items()}
        step_data[step] = data
        progress = max(session.progress, self.progress_for(step))
        updated = session.model_copy(update={"step_data": step_data, "progress": progress})

        self._emit(updated, "onboarding.step_completed", {
            "step": step,
            "progress": progress,
            "fields": sorted(data),
        })

        if step < self.total_steps:
            transition = NextStepTransition(
                completed_step=step, next_step=step + 1, progress=progress
            )
        else:
            transition = NextStepTransition(completed_step=step, to_review=True, progress=progress)
        return updated, transition

    def enter_review(self, session: WizardSession) -> ReviewView | RedirectError:
        """Show everything entered so far, once every step is complete."""
        redirect = self._completeness_guard(session)
        if redirect is not None:
            return redirect

        steps = {n: dict(session.step_data[n]) for n in range(1, self.total_steps + 1)}
        self._emit(session, "onboarding.review_reached", {"steps": self.total_steps})
        return ReviewView(
            steps=steps,
            titles={s.step_number: s.title for s in self._registry.steps},
            record=self.merged_fields(session),
            progress=session.progress,
        )

    async def submit_final(
        self, session: WizardSession
    ) -> tuple[WizardSession, SubmittedConfirmation | RedirectError]:
        """Create the business and clear the wizard.

        Raises:
            PersistenceError: If the business could not be stored. The
                session is not touched, so the visitor can retry.
        """
        redirect = self._completeness_guard(session)
        if redirect is not None:
            return session, redirect

        pending = PendingRecord.from_step_data(session.step_data)
        try:
            business = await self._materializer.materialize(pending)
        except PersistenceError as exc:
            logger.error("Onboarding submission failed for session %s: %s", session.session_id, exc)
            self._emit(session, "onboarding.submission_failed", {
                "error": str(exc),
                "business_name": pending.business_name,
            })
            raise

        self._emit(session, "onboarding.submitted", {
            "business_id": business.id,
            "business_slug": business.business_slug,
        })
        cleared = WizardSession(session_id=session.session_id)
        return cleared, SubmittedConfirmation(
            business_id=business.id,
            business_slug=business.business_slug,
            status=business.status.value,
        )

    def abandon(self, session: WizardSession) -> WizardSession:
        """Drop all wizard data for the session."""
        if not session.is_empty:
            self._emit(session, "onboarding.abandoned", {
                "last_step": session.highest_completed,
                "progress": session.progress,
            })
        return WizardSession(session_id=session.session_id)

    def merged_fields(self, session: WizardSession) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for step in sorted(session.step_data):
            merged.update(session.step_data[step])
        return merged

    def _emit(self, session: WizardSession, action: str, details: dict[str, Any]) -> None:
        event = TelemetryEvent(
            session_id=session.session_id,
            actor=session.session_id or "anonymous",
            action=action,
            resource="onboarding",
            details=details,
        )
        try:
            self._telemetry.emit(event)
        except Exception:
            logger.warning("Telemetry sink failed for %s", action, exc_info=True)
