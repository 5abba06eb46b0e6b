# routers/wizards.py

from fastapi import APIRouter, Depends, HTTPException

from core.config import settings
from core.errors import ProfileNotFound, RoleNotAssigned
from core.logging_config import logger
from core.wizard import Wizard
from core.wizard_registry import WizardRegistry, get_registry
from dependencies.auth import CurrentUser, get_current_user
from flows import get_flow
from models.wizard import WizardFieldsUpdate, WizardStart, WizardSubmitResponse
from services.profiles import fetch_base_profile, resolve_role

router = APIRouter(
    prefix="/wizards",
    tags=["Wizards"],
)


def _view(wizard: Wizard) -> dict:
    flow = get_flow(wizard.flow)
    return {**wizard.view(), "options": flow.options(wizard.context)}


# -----------------------------------------------------
# POST /wizards/{flow}: open a new session
# -----------------------------------------------------
@router.post("/{flow_name}", summary="Start a wizard")
def start_wizard(
    flow_name: str,
    payload: WizardStart = WizardStart(),
    current_user: CurrentUser = Depends(get_current_user),
    registry: WizardRegistry = Depends(get_registry),
):
    flow = get_flow(flow_name)

    if flow.roles:
        try:
            role = resolve_role(current_user.id)
        except RoleNotAssigned:
            raise HTTPException(403, "Select a role first")
        if role not in flow.roles:
            raise HTTPException(403, f"The {flow.name} flow is not available for {role.value} accounts")

    context = flow.load_context(current_user, payload.model_dump())

    try:
        profile = fetch_base_profile(current_user.id)
    except ProfileNotFound:
        profile = None

    wizard = Wizard(
        flow.steps,
        flow.action(current_user, context),
        flow.initial_data(profile, context),
        flow=flow.name,
        owner_id=current_user.id,
        submit_timeout=settings.WIZARD_SUBMIT_TIMEOUT_SECONDS,
        context=context,
    )
    wizard.on_complete = lambda result: registry.discard(wizard.id)

    registry.add(wizard)
    logger.info(f"🧭 {flow.name} wizard {wizard.id} started by {current_user.id}")
    return _view(wizard)


# -----------------------------------------------------
# GET /wizards/{id}
# -----------------------------------------------------
@router.get("/{wizard_id}", summary="Current wizard state")
def get_wizard(
    wizard_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    registry: WizardRegistry = Depends(get_registry),
):
    return _view(registry.get(wizard_id, current_user.id))


# -----------------------------------------------------
# PATCH /wizards/{id}/fields: merge form values
# -----------------------------------------------------
@router.patch("/{wizard_id}/fields", summary="Update form fields")
def update_fields(
    wizard_id: str,
    payload: WizardFieldsUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    registry: WizardRegistry = Depends(get_registry),
):
    wizard = registry.get(wizard_id, current_user.id)
    wizard.update_fields(payload.values)
    return _view(wizard)


# -----------------------------------------------------
# Navigation
# Blocked moves return 200 with the step unchanged;
# the validation block says why.
# -----------------------------------------------------
@router.post("/{wizard_id}/next", summary="Advance one step")
def next_step(
    wizard_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    registry: WizardRegistry = Depends(get_registry),
):
    wizard = registry.get(wizard_id, current_user.id)
    wizard.advance()
    return _view(wizard)


@router.post("/{wizard_id}/back", summary="Go back one step")
def previous_step(
    wizard_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    registry: WizardRegistry = Depends(get_registry),
):
    wizard = registry.get(wizard_id, current_user.id)
    wizard.retreat()
    return _view(wizard)


@router.post("/{wizard_id}/jump/{step_id}", summary="Jump back to a completed step")
def jump_to_step(
    wizard_id: str,
    step_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    registry: WizardRegistry = Depends(get_registry),
):
    wizard = registry.get(wizard_id, current_user.id)
    wizard.jump_to(step_id)
    return _view(wizard)


# -----------------------------------------------------
# POST /wizards/{id}/submit: run the terminal action
# -----------------------------------------------------
@router.post("/{wizard_id}/submit", response_model=WizardSubmitResponse, summary="Submit the wizard")
async def submit_wizard(
    wizard_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    registry: WizardRegistry = Depends(get_registry),
):
    wizard = registry.get(wizard_id, current_user.id)
    result = await wizard.submit()

    return WizardSubmitResponse(
        ok=result.ok,
        data=result.data,
        error=result.error,
        wizard=_view(wizard),
    )


# -----------------------------------------------------
# DELETE /wizards/{id}: cancel and discard form data
# -----------------------------------------------------
@router.delete("/{wizard_id}", summary="Close a wizard")
def close_wizard(
    wizard_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    registry: WizardRegistry = Depends(get_registry),
):
    registry.close(wizard_id, current_user.id)
    return {"status": "closed", "id": wizard_id}
