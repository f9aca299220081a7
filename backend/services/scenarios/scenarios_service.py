import logging
from typing import Optional

from db.session import get_db_context
from schemas.generator.scenario import DeriveScenariosResponse
from services.requirements.handoff_service import clear_handoff, load_handoff
from services.scenarios.scenario_manager import ScenarioValidationError
from services.workspace.workspace_service import Workspace


logger = logging.getLogger(__name__)


def _blue(text: str) -> str:
    return f"\033[34m{text}\033[0m"


async def derive_scenarios(workspace: Workspace, requirements: Optional[str] = None) -> DeriveScenariosResponse:
    """
    Replace a workspace's scenarios with scenarios parsed from a requirements document.

    Args:
        workspace: Target workspace
        requirements: Document text; when omitted the stored analysis hand-off is used

    Returns:
        DeriveScenariosResponse with the new collection and whether the fallback scenario was used

    Raises:
        ScenarioValidationError: No document given and no hand-off stored
    """
    text = requirements
    if not (text or "").strip():
        with get_db_context() as db:
            handoff = load_handoff(db, workspace.id)
        if handoff is None and workspace.analysis is not None:
            handoff = workspace.analysis
        if handoff is None:
            raise ScenarioValidationError("no requirements document to derive scenarios from")
        text = handoff.requirements

    logger.info(_blue("scenarios_service: deriving scenarios for workspace=%s chars=%d"), workspace.id, len(text))
    scenarios, error = await workspace.scenarios.parse_from_document(text)

    # The hand-off is consumed whether parsing succeeded or fell back
    with get_db_context() as db:
        clear_handoff(db, workspace.id)

    logger.info(
        _blue("scenarios_service: workspace=%s now has %d scenarios (fallback=%s)"),
        workspace.id, len(scenarios), error is not None,
    )
    return DeriveScenariosResponse(scenarios=scenarios, fallback=error is not None, error=error)
