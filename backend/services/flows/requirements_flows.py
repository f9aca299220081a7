"""Prompt flows run over a whole requirements document during intake."""

from typing import Optional

from schemas.generator.flow_schemas import (
    ComplianceCheckInput,
    ComplianceCheckOutput,
    ParseProjectDetailsInput,
    ProjectDetails,
    ValidateRequirementsInput,
    ValidateRequirementsOutput,
)
from services.flows.prompt_flow import PromptFlow


validate_requirements_flow = PromptFlow(
    name="validateRequirements",
    env_prefix="VALIDATE_REQUIREMENTS",
    prompt_module="services.llm.prompts.validate_requirements_prompt",
    input_model=ValidateRequirementsInput,
    output_model=ValidateRequirementsOutput,
    description="Checks requirements for completeness against healthcare software best practices.",
)

compliance_check_flow = PromptFlow(
    name="complianceCheck",
    env_prefix="COMPLIANCE_CHECK",
    prompt_module="services.llm.prompts.compliance_check_prompt",
    input_model=ComplianceCheckInput,
    output_model=ComplianceCheckOutput,
    description="Reviews requirements against regulatory standards and suggests improvements.",
)

parse_project_details_flow = PromptFlow(
    name="parseProjectDetails",
    env_prefix="PARSE_PROJECT_DETAILS",
    prompt_module="services.llm.prompts.parse_project_details_prompt",
    input_model=ParseProjectDetailsInput,
    output_model=ProjectDetails,
    description="Extracts application name, objective, features and tech stack.",
)


async def validate_requirements(requirements: str, model_name: Optional[str] = None) -> ValidateRequirementsOutput:
    return await validate_requirements_flow.run({"requirements": requirements}, model_name=model_name)


async def compliance_check(
    requirements: str, compliance_standards: str, model_name: Optional[str] = None
) -> ComplianceCheckOutput:
    return await compliance_check_flow.run(
        {"requirements": requirements, "complianceStandards": compliance_standards},
        model_name=model_name,
    )


async def parse_project_details(requirements: str, model_name: Optional[str] = None) -> ProjectDetails:
    return await parse_project_details_flow.run({"requirements": requirements}, model_name=model_name)
