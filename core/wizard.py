# core/wizard.py

"""
Wizard engine shared by every multi-step flow (booking, onboarding,
maintenance tickets, vendor registration, visit scheduling).

The transition functions are pure: they take a WizardState and the step
table and return a new WizardState. The Wizard class owns one state for
one open flow and adds the submit lifecycle (single outstanding submit,
completion callback, close). State replacement on a Wizard goes through a
per-wizard lock; edits run on threadpool threads, submit on the event loop.
"""

import asyncio
import threading
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from core.errors import GENERIC_FAILURE_MESSAGE, UnknownStep
from core.logging_config import get_logger
from core.validators import StepValidation, StepValidator, always_valid
from models.enums import WizardStatus


logger = get_logger("wizard")

SUBMIT_IN_PROGRESS = "Submission already in progress"
SUBMIT_TIMED_OUT = "The request timed out. Please try again."


# ============================================================
# Models
# ============================================================

class WizardStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    order: int
    rule: StepValidator = Field(default=always_valid, exclude=True, repr=False)


class WizardState(BaseModel):
    model_config = ConfigDict(frozen=True)

    current_step_id: str
    form_data: Dict[str, Any] = {}
    is_submitting: bool = False
    status: WizardStatus = WizardStatus.editing
    last_error: Optional[str] = None


class ActionResult(BaseModel):
    """Uniform outcome of a terminal action."""

    ok: bool
    data: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, data: Any = None) -> "ActionResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "ActionResult":
        return cls(ok=False, error=error)


Steps = Sequence[WizardStep]
TerminalAction = Callable[[dict], Awaitable[ActionResult]]


def define_steps(*specs: Tuple[str, str, StepValidator]) -> Tuple[WizardStep, ...]:
    """
    Build an ordered step table from (id, label, rule) triples.
    Order follows argument position.
    """
    if not specs:
        raise ValueError("A wizard needs at least one step")

    steps = tuple(
        WizardStep(id=step_id, label=label, order=index, rule=rule)
        for index, (step_id, label, rule) in enumerate(specs)
    )

    ids = [s.id for s in steps]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Duplicate step ids: {ids}")

    return steps


# ============================================================
# Pure transitions
# ============================================================

def step_index(steps: Steps, step_id: str) -> int:
    for index, step in enumerate(steps):
        if step.id == step_id:
            return index
    raise UnknownStep(step_id)


def current_step(state: WizardState, steps: Steps) -> WizardStep:
    return steps[step_index(steps, state.current_step_id)]


def is_last_step(state: WizardState, steps: Steps) -> bool:
    return step_index(steps, state.current_step_id) == len(steps) - 1


def _navigable(state: WizardState) -> bool:
    return state.status in (WizardStatus.editing, WizardStatus.failed) and not state.is_submitting


def initialize(steps: Steps, initial_data: Optional[dict] = None) -> WizardState:
    return WizardState(
        current_step_id=steps[0].id,
        form_data=dict(initial_data or {}),
    )


def update_fields(state: WizardState, values: Dict[str, Any]) -> WizardState:
    """Merge values into form_data. No validation, no step change."""
    if not _navigable(state):
        return state

    form_data = {**state.form_data, **values}
    return state.model_copy(update={
        "form_data": form_data,
        "status": WizardStatus.editing,
        "last_error": None,
    })


def update_field(state: WizardState, field_name: str, value: Any) -> WizardState:
    return update_fields(state, {field_name: value})


def validate_step(state: WizardState, steps: Steps) -> StepValidation:
    # Recomputed on every call; form_data may have changed since the last check
    return current_step(state, steps).rule(state.form_data)


def can_advance(state: WizardState, steps: Steps) -> bool:
    return validate_step(state, steps).valid


def advance(state: WizardState, steps: Steps) -> WizardState:
    """Move exactly one step forward when the current step validates."""
    if not _navigable(state) or is_last_step(state, steps):
        return state
    if not can_advance(state, steps):
        return state

    index = step_index(steps, state.current_step_id)
    return state.model_copy(update={
        "current_step_id": steps[index + 1].id,
        "status": WizardStatus.editing,
    })


def retreat(state: WizardState, steps: Steps) -> WizardState:
    """Move one step back. Never validates."""
    if not _navigable(state):
        return state

    index = step_index(steps, state.current_step_id)
    if index == 0:
        return state

    return state.model_copy(update={
        "current_step_id": steps[index - 1].id,
        "status": WizardStatus.editing,
    })


def jump_to(state: WizardState, steps: Steps, target_step_id: str) -> WizardState:
    """Jump back to an earlier (or the current) step; forward jumps are ignored."""
    target = steps[step_index(steps, target_step_id)]
    current = current_step(state, steps)

    if not _navigable(state) or target.order > current.order:
        return state

    return state.model_copy(update={
        "current_step_id": target.id,
        "status": WizardStatus.editing,
    })


# ============================================================
# Wizard session
# ============================================================

class Wizard:
    """
    One open flow: step table + state + terminal action.

    on_complete(result) fires exactly once after a successful submit.
    on_close() fires when the flow is cancelled; form data is discarded.
    """

    def __init__(
        self,
        steps: Steps,
        terminal_action: Optional[TerminalAction] = None,
        initial_data: Optional[dict] = None,
        *,
        flow: Optional[str] = None,
        owner_id: Optional[str] = None,
        on_complete: Optional[Callable[[ActionResult], None]] = None,
        on_close: Optional[Callable[[], None]] = None,
        submit_timeout: Optional[float] = None,
        context: Optional[dict] = None,
    ):
        self.id = str(uuid.uuid4())
        self.steps = tuple(steps)
        self.flow = flow
        self.owner_id = owner_id
        self.terminal_action = terminal_action
        self.on_complete = on_complete
        self.on_close = on_close
        self.submit_timeout = submit_timeout
        # Flow context (property, lead) the session was opened with
        self.context = context or {}

        self.state = initialize(self.steps, initial_data)
        self._lock = threading.Lock()
        self.result: Optional[ActionResult] = None
        self.closed = False

    # ---------------------------------------------------------
    # Field edits & navigation
    # ---------------------------------------------------------
    def _transition(self, change: Callable[[WizardState], WizardState]) -> WizardState:
        with self._lock:
            self.state = change(self.state)
            return self.state

    def update_field(self, field_name: str, value: Any) -> WizardState:
        return self._transition(lambda s: update_field(s, field_name, value))

    def update_fields(self, values: Dict[str, Any]) -> WizardState:
        return self._transition(lambda s: update_fields(s, values))

    def validation(self) -> StepValidation:
        return validate_step(self.state, self.steps)

    def can_advance(self) -> bool:
        return can_advance(self.state, self.steps)

    def advance(self) -> WizardState:
        return self._transition(lambda s: advance(s, self.steps))

    def retreat(self) -> WizardState:
        return self._transition(lambda s: retreat(s, self.steps))

    def jump_to(self, target_step_id: str) -> WizardState:
        return self._transition(lambda s: jump_to(s, self.steps, target_step_id))

    @property
    def is_complete(self) -> bool:
        return self.state.status == WizardStatus.complete

    # ---------------------------------------------------------
    # Submit
    # ---------------------------------------------------------
    async def submit(self, terminal_action: Optional[TerminalAction] = None) -> ActionResult:
        action = terminal_action or self.terminal_action
        if action is None:
            raise RuntimeError(f"Wizard {self.id} has no terminal action")

        # Checked and set before the first await, under the state lock:
        # concurrent submits and edits on the same wizard see is_submitting.
        with self._lock:
            state = self.state

            if state.is_submitting:
                logger.warning(f"Wizard {self.id}: duplicate submit ignored")
                return ActionResult.failure(SUBMIT_IN_PROGRESS)

            if self.closed or state.status == WizardStatus.complete:
                return ActionResult.failure("This flow has already finished")

            if not is_last_step(state, self.steps):
                return ActionResult.failure("Please complete the remaining steps first")

            validation = validate_step(state, self.steps)
            if not validation.valid:
                return ActionResult.failure(validation.message)

            self.state = state.model_copy(update={
                "is_submitting": True,
                "status": WizardStatus.submitting,
                "last_error": None,
            })

        result = await self._run_action(action, dict(state.form_data))

        if result.ok:
            self._transition(lambda s: s.model_copy(update={
                "is_submitting": False,
                "status": WizardStatus.complete,
            }))
            self.result = result
            logger.info(f"Wizard {self.id} ({self.flow}) completed")
            self._notify_complete(result)
        else:
            # form_data untouched so the user can retry
            self._transition(lambda s: s.model_copy(update={
                "is_submitting": False,
                "status": WizardStatus.failed,
                "last_error": result.error,
            }))
            logger.info(f"Wizard {self.id} ({self.flow}) submit failed: {result.error}")

        return result

    async def _run_action(self, action: TerminalAction, form_data: dict) -> ActionResult:
        try:
            if self.submit_timeout:
                result = await asyncio.wait_for(action(form_data), self.submit_timeout)
            else:
                result = await action(form_data)
        except asyncio.TimeoutError:
            logger.warning(f"Wizard {self.id}: terminal action timed out after {self.submit_timeout}s")
            return ActionResult.failure(SUBMIT_TIMED_OUT)
        except Exception as e:
            logger.error(f"Wizard {self.id}: terminal action raised", exc_info=e)
            return ActionResult.failure(GENERIC_FAILURE_MESSAGE)

        if not isinstance(result, ActionResult):
            logger.error(f"Wizard {self.id}: terminal action returned {type(result).__name__}")
            return ActionResult.failure(GENERIC_FAILURE_MESSAGE)

        return result

    def _notify_complete(self, result: ActionResult) -> None:
        if not self.on_complete:
            return
        try:
            self.on_complete(result)
        except Exception as e:
            logger.error(f"Wizard {self.id}: on_complete callback failed", exc_info=e)

    # ---------------------------------------------------------
    # Close / cancel
    # ---------------------------------------------------------
    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._transition(lambda s: s.model_copy(update={"form_data": {}}))
        if self.on_close:
            self.on_close()

    # ---------------------------------------------------------
    # API view
    # ---------------------------------------------------------
    def view(self) -> dict:
        state = self.state
        current_index = step_index(self.steps, state.current_step_id)
        validation = self.validation()

        steps = []
        for index, step in enumerate(self.steps):
            if self.is_complete or index < current_index:
                progress = "done"
            elif index == current_index:
                progress = "current"
            else:
                progress = "upcoming"
            steps.append({"id": step.id, "label": step.label, "order": step.order, "progress": progress})

        return {
            "id": self.id,
            "flow": self.flow,
            "status": state.status.value,
            "current_step": state.current_step_id,
            "is_last_step": current_index == len(self.steps) - 1,
            "steps": steps,
            "form_data": state.form_data,
            "is_submitting": state.is_submitting,
            "can_advance": validation.valid,
            "validation": validation.model_dump(),
            "last_error": state.last_error,
            "result": self.result.data if self.result else None,
        }
