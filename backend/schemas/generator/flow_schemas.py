"""
Input and output schemas for the six prompt flows.

Field names follow the JSON the web client and the model exchange, so they are
camelCase on purpose.
"""

from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class RequirementType(str, Enum):
    FUNCTIONAL = "Functional"
    NON_FUNCTIONAL = "Non-Functional"
    BUSINESS = "Business"


def coerce_enum_value(value: Any, enum_cls: type[Enum]) -> Any:
    """Match a string against enum values ignoring case; leave anything else for pydantic to reject."""
    if isinstance(value, str):
        wanted = value.strip().lower()
        for member in enum_cls:
            if member.value.lower() == wanted:
                return member.value
    return value


class FlowModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)


# ---------- validateRequirements ----------

class ValidateRequirementsInput(FlowModel):
    requirements: str = Field(description="The software requirements to validate.")


class MissingElement(FlowModel):
    element: str = Field(description="The missing element.")
    reason: str = Field(description="The reason why the element is important.")


class CompletenessValidation(FlowModel):
    isValid: bool = Field(description="Whether the requirements are complete.")
    missingElements: List[MissingElement] = Field(
        description="Suggestions for missing elements."
    )


class ValidateRequirementsOutput(FlowModel):
    completenessValidation: CompletenessValidation = Field(
        description="Completeness validation result."
    )


# ---------- complianceCheck ----------

class ComplianceCheckInput(FlowModel):
    requirements: str = Field(description="The software requirements to check.")
    complianceStandards: str = Field(
        description="The compliance standards to check against (e.g. FDA, GDPR, ISO 13485, HIPAA)."
    )


class ComplianceCheckOutput(FlowModel):
    complianceReport: str = Field(
        description="A report highlighting violations or areas of concern."
    )
    suggestions: str = Field(
        description="Suggestions for improving the requirements to meet the standards."
    )


# ---------- parseProjectDetails ----------

class ParseProjectDetailsInput(FlowModel):
    requirements: str = Field(description="The software requirements to parse.")


class ProjectDetails(FlowModel):
    appName: str = Field(description="The name of the application.")
    objective: str = Field(description="A one-line objective of the application.")
    features: List[str] = Field(description="A list of key features.")
    techStack: List[str] = Field(description="A list of technologies in the tech stack.")


# ---------- parseScenarios ----------

class ParseScenariosInput(FlowModel):
    requirements: str = Field(
        description="The full text content of the software requirements document."
    )


class ParsedScenario(FlowModel):
    reqId: str = Field(description="A unique identifier for the requirement/scenario (e.g., REQ-001).")
    title: str = Field(description="A concise, descriptive title for the scenario.")
    description: str = Field(description="A detailed description of the requirement.")
    requirementType: RequirementType = Field(description="The type of the requirement.")
    requirementSource: str = Field(
        description="The source of the requirement (e.g., Stakeholder, Document Name)."
    )
    priority: Priority = Field(description="The priority of the scenario.")

    @field_validator("requirementType", mode="before")
    @classmethod
    def _requirement_type_case(cls, v):
        return coerce_enum_value(v, RequirementType)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority_case(cls, v):
        return coerce_enum_value(v, Priority)


class ParseScenariosOutput(FlowModel):
    scenarios: List[ParsedScenario] = Field(
        description="An array of structured scenarios parsed from the document."
    )


# ---------- generateTestCases ----------

class GenerateTestCasesInput(FlowModel):
    scenario: str = Field(
        description="A detailed description of the scenario for which test cases need to be generated."
    )
    complianceStandards: List[str] = Field(
        description="Compliance standards relevant to the scenario (e.g., FDA, GDPR, ISO)."
    )
    priority: Priority = Field(
        description="The priority of the scenario, influencing the depth and rigor of the test cases."
    )


class TestCase(FlowModel):
    testCaseId: str = Field(description="A unique identifier for the test case.")
    title: str = Field(description="A concise title for the test case.")
    steps: List[str] = Field(description="A list of steps to execute the test case.")
    expectedResult: str = Field(description="The expected outcome after executing the test case.")
    complianceTags: List[str] = Field(
        description="The compliance standards that this test case verifies."
    )
    priority: Priority = Field(description="The priority of the test case.")
    confidenceLevel: str = Field(
        description="The confidence level of the test case, indicating its reliability."
    )

    # Keep pytest from collecting this model as a test class
    __test__ = False

    @field_validator("priority", mode="before")
    @classmethod
    def _priority_case(cls, v):
        return coerce_enum_value(v, Priority)


class GenerateTestCasesOutput(FlowModel):
    testCases: List[TestCase] = Field(description="An array of generated test cases.")


# ---------- analyzeImpactOnChange ----------

class ImpactAnalysisInput(FlowModel):
    requirementChanges: str = Field(description="A summary of the requirement changes.")
    existingTestCases: str = Field(
        description="The existing test cases, one 'ID: x, Title: y' line each."
    )


class ImpactAnalysisOutput(FlowModel):
    impactAnalysis: str = Field(
        description="Analysis of the impact of the changes on the existing test cases and the modifications needed."
    )
