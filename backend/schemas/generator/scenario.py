from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.generator.flow_schemas import (
    ParsedScenario,
    Priority,
    RequirementType,
    TestCase,
    coerce_enum_value,
)


class Scenario(BaseModel):
    """One requirement scenario with the test cases generated for it."""

    id: str
    reqId: str
    title: str
    description: str
    requirementType: RequirementType
    requirementSource: str
    priority: Priority
    testCases: List[TestCase] = Field(default_factory=list)
    areTestsGenerating: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_parsed(cls, parsed: ParsedScenario) -> "Scenario":
        return cls(
            id=parsed.reqId,
            reqId=parsed.reqId,
            title=parsed.title,
            description=parsed.description,
            requirementType=parsed.requirementType,
            requirementSource=parsed.requirementSource,
            priority=parsed.priority,
            testCases=[],
            areTestsGenerating=False,
        )


class ScenarioForm(BaseModel):
    """Fields a user can set when creating or editing a scenario."""

    reqId: str = ""
    title: str = ""
    description: str = ""
    requirementType: RequirementType = RequirementType.FUNCTIONAL
    requirementSource: str = "Manual"
    priority: Priority = Priority.MEDIUM

    @field_validator("requirementType", mode="before")
    @classmethod
    def _requirement_type_case(cls, v):
        return coerce_enum_value(v, RequirementType)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority_case(cls, v):
        return coerce_enum_value(v, Priority)

    @classmethod
    def from_scenario(cls, scenario: Scenario) -> "ScenarioForm":
        return cls(
            reqId=scenario.reqId,
            title=scenario.title,
            description=scenario.description,
            requirementType=scenario.requirementType,
            requirementSource=scenario.requirementSource,
            priority=scenario.priority,
        )


class PendingEdit(BaseModel):
    """An edit held back until the user confirms the impact analysis."""

    scenarioId: str
    form: ScenarioForm
    changeDescription: str
    impactAnalysis: str


class EditOutcome(BaseModel):
    """
    Result of an edit request.

    status is one of:
        applied         - edit stored, test cases untouched
        pending_confirmation - impact analysis ready, waiting for confirm/cancel
        applied_without_analysis - impact analysis failed, edit stored anyway
    """

    status: str
    scenario: Scenario
    impactAnalysis: Optional[str] = None
    changeDescription: Optional[str] = None
    error: Optional[str] = None


class DeriveScenariosRequest(BaseModel):
    # When omitted the stored analysis hand-off is used
    requirements: Optional[str] = None


class DeriveScenariosResponse(BaseModel):
    scenarios: List[Scenario]
    fallback: bool = False
    error: Optional[str] = None
