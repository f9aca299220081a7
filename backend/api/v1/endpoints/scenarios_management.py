import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request

from api.v1.errors import to_http_exception
from core.rate_limit import flow_rate_limit
from deps import get_workspace
from schemas.generator.scenario import DeriveScenariosRequest, ScenarioForm
from services.scenarios import scenarios_service
from services.workspace.workspace_service import Workspace


router = APIRouter()

logger = logging.getLogger(__name__)


def _dump(scenario) -> dict:
    return scenario.model_dump(mode="json")


@router.post("/{workspace_id}/scenarios/derive")
@flow_rate_limit()
async def derive_scenarios(
    request: Request,
    payload: Optional[DeriveScenariosRequest] = None,
    workspace: Workspace = Depends(get_workspace),
):
    """
    Replace the scenario list with scenarios parsed from the stored analysis
    hand-off (or from `requirements` when given). Parsing failures produce a
    single fallback scenario instead of an error.
    """
    try:
        requirements = payload.requirements if payload else None
        result = await scenarios_service.derive_scenarios(workspace, requirements)
        return result.model_dump(mode="json")
    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e)


@router.get("/{workspace_id}/scenarios")
def list_scenarios(workspace: Workspace = Depends(get_workspace)):
    return {"scenarios": [_dump(s) for s in workspace.scenarios.list()]}


@router.post("/{workspace_id}/scenarios", status_code=201)
def create_scenario(form: ScenarioForm, workspace: Workspace = Depends(get_workspace)):
    try:
        return _dump(workspace.scenarios.create(form))
    except Exception as e:
        raise to_http_exception(e)


@router.get("/{workspace_id}/scenarios/{scenario_id}")
def read_scenario(scenario_id: str, workspace: Workspace = Depends(get_workspace)):
    try:
        scenario = workspace.scenarios.get(scenario_id)
    except Exception as e:
        raise to_http_exception(e)
    pending = workspace.scenarios.pending_edit(scenario_id)
    return {
        **_dump(scenario),
        "pendingEdit": pending.model_dump(mode="json") if pending else None,
    }


@router.put("/{workspace_id}/scenarios/{scenario_id}")
@flow_rate_limit()
async def edit_scenario(
    request: Request,
    scenario_id: str,
    form: ScenarioForm,
    force: bool = Query(False, description="Apply even if impact analysis fails under fail_closed"),
    workspace: Workspace = Depends(get_workspace),
):
    """
    Edit a scenario. When it has test cases and its title or description
    changes, the response carries the impact analysis with
    status=pending_confirmation and the edit waits for /edit/confirm or /edit/cancel.
    """
    try:
        outcome = await workspace.scenarios.edit(scenario_id, form, force=force)
        return outcome.model_dump(mode="json")
    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{workspace_id}/scenarios/{scenario_id}/edit/confirm")
def confirm_edit(scenario_id: str, workspace: Workspace = Depends(get_workspace)):
    try:
        return _dump(workspace.scenarios.confirm_edit(scenario_id))
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{workspace_id}/scenarios/{scenario_id}/edit/cancel")
def cancel_edit(scenario_id: str, workspace: Workspace = Depends(get_workspace)):
    try:
        return _dump(workspace.scenarios.cancel_edit(scenario_id))
    except Exception as e:
        raise to_http_exception(e)


@router.delete("/{workspace_id}/scenarios/{scenario_id}")
def delete_scenario(scenario_id: str, workspace: Workspace = Depends(get_workspace)):
    try:
        workspace.scenarios.delete(scenario_id)
    except Exception as e:
        raise to_http_exception(e)
    return {"deleted": True, "id": scenario_id}


@router.post("/{workspace_id}/scenarios/{scenario_id}/generate-tests", status_code=202)
@flow_rate_limit()
async def generate_tests(
    request: Request,
    scenario_id: str,
    background_tasks: BackgroundTasks,
    workspace: Workspace = Depends(get_workspace),
):
    """
    Start test case generation in the background. Poll the scenario until
    areTestsGenerating is false.
    """
    try:
        scenario = workspace.scenarios.begin_generation(scenario_id)
    except Exception as e:
        raise to_http_exception(e)
    background_tasks.add_task(workspace.scenarios.run_generation, scenario_id)
    logger.info("scenarios_management: generation queued for workspace=%s scenario=%s", workspace.id, scenario_id)
    return {"status": "In Progress", "scenario": _dump(scenario)}


@router.delete("/{workspace_id}/scenarios/{scenario_id}/generate-tests")
def cancel_generation(scenario_id: str, workspace: Workspace = Depends(get_workspace)):
    try:
        return _dump(workspace.scenarios.cancel_generation(scenario_id))
    except Exception as e:
        raise to_http_exception(e)
