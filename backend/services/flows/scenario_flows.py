"""Prompt flows that work on scenarios: splitting a document and change impact analysis."""

from typing import Optional

from schemas.generator.flow_schemas import (
    ImpactAnalysisInput,
    ImpactAnalysisOutput,
    ParseScenariosInput,
    ParseScenariosOutput,
)
from services.flows.prompt_flow import PromptFlow


parse_scenarios_flow = PromptFlow(
    name="parseScenarios",
    env_prefix="PARSE_SCENARIOS",
    prompt_module="services.llm.prompts.parse_scenarios_prompt",
    input_model=ParseScenariosInput,
    output_model=ParseScenariosOutput,
    description="Splits a requirements document into structured scenarios.",
)

impact_analysis_flow = PromptFlow(
    name="analyzeImpactOnChange",
    env_prefix="IMPACT_ANALYSIS",
    prompt_module="services.llm.prompts.impact_analysis_prompt",
    input_model=ImpactAnalysisInput,
    output_model=ImpactAnalysisOutput,
    description="Explains how a scenario change affects its existing test cases.",
)


async def parse_scenarios(requirements: str, model_name: Optional[str] = None) -> ParseScenariosOutput:
    return await parse_scenarios_flow.run({"requirements": requirements}, model_name=model_name)


async def analyze_impact_on_change(
    requirement_changes: str, existing_test_cases: str, model_name: Optional[str] = None
) -> ImpactAnalysisOutput:
    return await impact_analysis_flow.run(
        {"requirementChanges": requirement_changes, "existingTestCases": existing_test_cases},
        model_name=model_name,
    )
