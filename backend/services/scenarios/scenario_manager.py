"""
Scenario and test case manager.

Holds the ordered scenario collection of one workspace and runs the scenario
workflows: parse from document, create, edit (with impact analysis when test
cases exist), delete and test case generation. Scenarios are immutable models;
every change stores a new copy built from the currently stored scenario.
"""

import asyncio
import logging
import uuid
from typing import Callable, Dict, List, Optional, Set, Tuple

from core.config import ComplianceConfigs, ImpactAnalysisConfigs
from schemas.generator.flow_schemas import Priority, RequirementType, TestCase
from schemas.generator.scenario import EditOutcome, PendingEdit, Scenario, ScenarioForm
from services.generator import actions_service
from services.llm.errors import FlowError

logger = logging.getLogger(__name__)

Notifier = Callable[..., object]

FALLBACK_SCENARIO_TITLE = "Initial Scenario from Requirements"
UPLOADED_DOCUMENT_SOURCE = "Uploaded Document"


class ScenarioError(Exception):
    """Base class for scenario workflow errors."""


class ScenarioNotFoundError(ScenarioError):
    pass


class ScenarioValidationError(ScenarioError):
    pass


class GenerationInProgressError(ScenarioError):
    pass


class EditInProgressError(ScenarioError):
    """An impact analysis or a pending edit already exists for the scenario."""


class NoPendingEditError(ScenarioError):
    pass


def new_scenario_id() -> str:
    return f"SCN-{uuid.uuid4().hex}"


def describe_change(current: Scenario, form: ScenarioForm) -> str:
    """Natural-language summary of a title/description change."""
    changes = []
    if current.title != form.title:
        changes.append(f'Title changed from "{current.title}" to "{form.title}".')
    if current.description != form.description:
        changes.append("Description updated.")
    return " ".join(changes)


def fallback_scenario(requirements: str) -> Scenario:
    scenario_id = new_scenario_id()
    return Scenario(
        id=scenario_id,
        reqId=scenario_id,
        title=FALLBACK_SCENARIO_TITLE,
        description=requirements,
        requirementType=RequirementType.FUNCTIONAL,
        requirementSource=UPLOADED_DOCUMENT_SOURCE,
        priority=Priority.MEDIUM,
    )


class ScenarioManager:
    def __init__(self, notifier: Optional[Notifier] = None, failure_policy: Optional[str] = None):
        self._scenarios: List[Scenario] = []
        self._pending_edits: Dict[str, PendingEdit] = {}
        self._impact_running: Set[str] = set()
        self._generation_tasks: Dict[str, asyncio.Future] = {}
        self._cancel_requested: Set[asyncio.Future] = set()
        self._notify = notifier or (lambda *args, **kwargs: None)
        self.failure_policy = failure_policy or ImpactAnalysisConfigs.FAILURE_POLICY

    # ---------- collection ----------

    def list(self) -> List[Scenario]:
        return list(self._scenarios)

    def get(self, scenario_id: str) -> Scenario:
        for scenario in self._scenarios:
            if scenario.id == scenario_id:
                return scenario
        raise ScenarioNotFoundError(f"scenario '{scenario_id}' not found")

    def exists(self, scenario_id: str) -> bool:
        return any(s.id == scenario_id for s in self._scenarios)

    def pending_edit(self, scenario_id: str) -> Optional[PendingEdit]:
        return self._pending_edits.get(scenario_id)

    def _store(self, updated: Scenario) -> Scenario:
        for idx, scenario in enumerate(self._scenarios):
            if scenario.id == updated.id:
                self._scenarios[idx] = updated
                return updated
        raise ScenarioNotFoundError(f"scenario '{updated.id}' not found")

    def _update(self, scenario_id: str, **changes) -> Scenario:
        return self._store(self.get(scenario_id).model_copy(update=changes))

    def _cancel_task(self, scenario_id: str) -> None:
        # Unregistered at once so a new run can start while this one unwinds
        task = self._generation_tasks.pop(scenario_id, None)
        if task is not None and not task.done():
            self._cancel_requested.add(task)
            task.cancel()

    def _drop_activity(self, scenario_id: str) -> None:
        self._pending_edits.pop(scenario_id, None)
        self._cancel_task(scenario_id)

    def replace_all(self, scenarios: List[Scenario]) -> None:
        for scenario_id in [s.id for s in self._scenarios]:
            self._drop_activity(scenario_id)
        self._scenarios = list(scenarios)

    # ---------- parse ----------

    @staticmethod
    def _unique_ids(scenarios: List[Scenario]) -> List[Scenario]:
        seen: Dict[str, int] = {}
        result = []
        for scenario in scenarios:
            count = seen.get(scenario.id, 0)
            seen[scenario.id] = count + 1
            if count:
                scenario = scenario.model_copy(update={"id": f"{scenario.id}-{count + 1}"})
            result.append(scenario)
        return result

    async def parse_from_document(self, requirements: str) -> Tuple[List[Scenario], Optional[str]]:
        """
        Replace the collection with scenarios parsed from a requirements document.

        On a flow failure the collection becomes one fallback scenario holding
        the whole document, so the result is never empty.

        Returns:
            (scenarios, error) where error is the flow error message on fallback
        """
        try:
            parsed = await actions_service.run_parse_scenarios(requirements)
        except FlowError as e:
            logger.error("scenario_manager: scenario parsing failed, using fallback scenario: %s", e)
            self.replace_all([fallback_scenario(requirements)])
            self._notify(
                "Scenario Generation Failed",
                "Could not parse scenarios from the requirements.",
                "destructive",
            )
            return self.list(), str(e)

        if not parsed:
            logger.warning("scenario_manager: parser returned no scenarios, using fallback scenario")
            self.replace_all([fallback_scenario(requirements)])
            self._notify(
                "Scenario Generation Failed",
                "Could not parse scenarios from the requirements.",
                "destructive",
            )
            return self.list(), "no scenarios returned"

        self.replace_all(self._unique_ids(parsed))
        self._notify(
            "Scenarios Generated",
            f"We've created {len(self._scenarios)} scenarios from your document.",
        )
        return self.list(), None

    # ---------- create / edit / delete ----------

    @staticmethod
    def _validate_form(form: ScenarioForm) -> None:
        missing = [
            name
            for name in ("title", "description", "requirementSource")
            if not (getattr(form, name) or "").strip()
        ]
        if missing:
            raise ScenarioValidationError(f"required fields are empty: {', '.join(missing)}")

    def create(self, form: ScenarioForm) -> Scenario:
        """
        Append a user-created scenario.

        The id is the reqId. reqId is optional here, unlike the other form
        fields: when it is empty a generated SCN- id is used for both id and
        reqId, so API clients can add scenarios without numbering them.
        Duplicate ids are rejected.
        """
        self._validate_form(form)
        req_id = (form.reqId or "").strip() or new_scenario_id()
        if self.exists(req_id):
            raise ScenarioValidationError(f"a scenario with id '{req_id}' already exists")
        scenario = Scenario(
            id=req_id,
            reqId=req_id,
            title=form.title,
            description=form.description,
            requirementType=form.requirementType,
            requirementSource=form.requirementSource,
            priority=form.priority,
        )
        self._scenarios.append(scenario)
        self._notify("Scenario Added", f'Scenario "{form.title}" has been created.')
        logger.info("scenario_manager: created scenario %s", scenario.id)
        return scenario

    def _apply_form(self, scenario_id: str, form: ScenarioForm, clear_tests: bool = False) -> Scenario:
        changes = {
            "reqId": form.reqId or self.get(scenario_id).reqId,
            "title": form.title,
            "description": form.description,
            "requirementType": form.requirementType,
            "requirementSource": form.requirementSource,
            "priority": form.priority,
        }
        if clear_tests:
            changes["testCases"] = []
        return self._update(scenario_id, **changes)

    async def edit(self, scenario_id: str, form: ScenarioForm, force: bool = False) -> EditOutcome:
        """
        Edit a scenario.

        Without test cases, or when neither title nor description changed, the
        edit applies immediately. Otherwise an impact analysis runs first and
        the edit waits for confirm_edit/cancel_edit. When the analysis fails
        the failure policy decides: fail_open applies the edit and keeps the
        test cases, fail_closed re-raises unless `force` is set.

        Args:
            scenario_id: Scenario to edit
            form: New field values
            force: Apply the edit even if the impact analysis fails under fail_closed

        Returns:
            EditOutcome describing what happened
        """
        current = self.get(scenario_id)
        if scenario_id in self._impact_running or scenario_id in self._pending_edits:
            raise EditInProgressError(f"scenario '{scenario_id}' has an edit awaiting impact analysis")
        self._validate_form(form)

        content_changed = current.title != form.title or current.description != form.description
        if not current.testCases or not content_changed:
            updated = self._apply_form(scenario_id, form)
            self._notify("Scenario Updated")
            return EditOutcome(status="applied", scenario=updated)

        change = describe_change(current, form)
        self._impact_running.add(scenario_id)
        try:
            analysis = await actions_service.run_impact_analysis(change, current.testCases)
        except FlowError as e:
            logger.error("scenario_manager: impact analysis failed for %s: %s", scenario_id, e)
            self._notify("Impact Analysis Failed", str(e), "destructive")
            if self.failure_policy == ImpactAnalysisConfigs.FAIL_CLOSED and not force:
                raise
            updated = self._apply_form(scenario_id, form)
            return EditOutcome(
                status="applied_without_analysis",
                scenario=updated,
                changeDescription=change,
                error=str(e),
            )
        finally:
            self._impact_running.discard(scenario_id)

        # Raises if the scenario was deleted while the analysis ran
        stored = self.get(scenario_id)
        self._pending_edits[scenario_id] = PendingEdit(
            scenarioId=scenario_id,
            form=form,
            changeDescription=change,
            impactAnalysis=analysis,
        )
        return EditOutcome(
            status="pending_confirmation",
            scenario=stored,
            impactAnalysis=analysis,
            changeDescription=change,
        )

    def confirm_edit(self, scenario_id: str) -> Scenario:
        """Apply a pending edit and clear the scenario's test cases."""
        self.get(scenario_id)
        pending = self._pending_edits.pop(scenario_id, None)
        if pending is None:
            raise NoPendingEditError(f"scenario '{scenario_id}' has no pending edit")
        task = self._generation_tasks.get(scenario_id)
        if task is not None and not task.done():
            # Results would describe the old scenario
            self.cancel_generation(scenario_id)
        updated = self._apply_form(scenario_id, pending.form, clear_tests=True)
        self._notify("Scenario Updated", "Test cases have been cleared due to changes.")
        return updated

    def cancel_edit(self, scenario_id: str) -> Scenario:
        """Drop a pending edit, leaving the scenario unchanged."""
        scenario = self.get(scenario_id)
        if self._pending_edits.pop(scenario_id, None) is None:
            raise NoPendingEditError(f"scenario '{scenario_id}' has no pending edit")
        return scenario

    def delete(self, scenario_id: str) -> None:
        scenario = self.get(scenario_id)
        self._drop_activity(scenario_id)
        self._scenarios.remove(scenario)
        self._notify("Scenario Deleted")
        logger.info("scenario_manager: deleted scenario %s", scenario_id)

    # ---------- test case generation ----------

    def begin_generation(self, scenario_id: str) -> Scenario:
        """Mark a scenario as generating. Raises GenerationInProgressError if it already is."""
        scenario = self.get(scenario_id)
        if scenario.areTestsGenerating:
            raise GenerationInProgressError(f"test cases are already being generated for '{scenario_id}'")
        return self._update(scenario_id, areTestsGenerating=True)

    async def run_generation(self, scenario_id: str) -> Optional[List[TestCase]]:
        """
        Generate test cases for a scenario already marked by begin_generation.

        Success replaces the scenario's test cases; failure or cancellation
        only clears the generating flag. Results for a scenario deleted in the
        meantime are dropped.
        """
        if not self.exists(scenario_id):
            return None
        scenario = self.get(scenario_id)
        # Cancelled before the run started, or another run owns the scenario
        if not scenario.areTestsGenerating or scenario_id in self._generation_tasks:
            logger.info("scenario_manager: skipping test case generation for %s", scenario_id)
            return None
        task = asyncio.ensure_future(
            actions_service.run_test_case_generation(
                scenario.description,
                ComplianceConfigs.TEST_GENERATION_STANDARDS,
                scenario.priority.value,
            )
        )
        self._generation_tasks[scenario_id] = task
        logger.info("scenario_manager: test case generation started for %s", scenario_id)
        try:
            test_cases = await task
        except asyncio.CancelledError:
            if task in self._cancel_requested:
                logger.info("scenario_manager: test case generation cancelled for %s", scenario_id)
                return None
            raise
        except Exception as e:
            logger.error("scenario_manager: test case generation failed for %s: %s", scenario_id, e, exc_info=True)
            if self.exists(scenario_id):
                self._update(scenario_id, areTestsGenerating=False)
            self._notify("Test Case Generation Failed", str(e), "destructive")
            return None
        finally:
            if self._generation_tasks.get(scenario_id) is task:
                del self._generation_tasks[scenario_id]
            self._cancel_requested.discard(task)

        if not self.exists(scenario_id):
            logger.info("scenario_manager: dropping %d test cases for deleted scenario %s", len(test_cases), scenario_id)
            return None
        self._update(scenario_id, testCases=list(test_cases), areTestsGenerating=False)
        self._notify("Test Cases Generated", f'{len(test_cases)} test cases created for "{scenario.title}".')
        return list(test_cases)

    async def generate_tests(self, scenario_id: str) -> Optional[List[TestCase]]:
        self.begin_generation(scenario_id)
        return await self.run_generation(scenario_id)

    def cancel_generation(self, scenario_id: str) -> Scenario:
        """Cancel a running generation; test cases stay as they were."""
        scenario = self.get(scenario_id)
        self._cancel_task(scenario_id)
        if scenario.areTestsGenerating:
            scenario = self._update(scenario_id, areTestsGenerating=False)
        return scenario

    def is_generating(self, scenario_id: str) -> bool:
        task = self._generation_tasks.get(scenario_id)
        return task is not None and not task.done()
