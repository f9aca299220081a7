"""
Tests for the prompt flow runner and the six flows
"""

import asyncio

import pytest

from services.flows.flow_registry import FLOW_REGISTRY, get_flow
from services.flows.requirements_flows import compliance_check, validate_requirements
from services.flows.testcase_flows import generate_test_cases
from services.llm.errors import ModelOutputError, ModelServiceError, SchemaValidationError
from services.llm.gemini import gemini_invoker


def test_registry_lists_all_six_flows():
    assert set(FLOW_REGISTRY) == {
        "validateRequirements",
        "complianceCheck",
        "parseProjectDetails",
        "parseScenarios",
        "generateTestCases",
        "analyzeImpactOnChange",
    }


def test_validate_requirements_returns_typed_result(fake_gemini, validation_reply):
    fake_gemini.reply("validateRequirements", validation_reply)
    result = asyncio.run(validate_requirements("Users log in with email."))
    assert result.completenessValidation.isValid is False
    assert result.completenessValidation.missingElements[0].element == "Audit logging"
    prompt = fake_gemini.calls_for("validateRequirements")[0]
    assert "Users log in with email." in prompt
    assert "healthcare software" in prompt


def test_compliance_prompt_carries_standards(fake_gemini, compliance_reply):
    fake_gemini.reply("complianceCheck", compliance_reply)
    result = asyncio.run(compliance_check("Store patient data.", "FDA, GDPR, ISO 13485, HIPAA"))
    assert result.suggestions.startswith("Define password")
    assert "FDA, GDPR, ISO 13485, HIPAA" in fake_gemini.calls_for("complianceCheck")[0]


def test_test_case_prompt_joins_standards_list(fake_gemini, testcases_reply):
    fake_gemini.reply("generateTestCases", testcases_reply)
    result = asyncio.run(generate_test_cases("Login scenario", ["FDA", "GDPR"], "High"))
    assert len(result.testCases) == 2
    prompt = fake_gemini.calls_for("generateTestCases")[0]
    assert "FDA, GDPR" in prompt
    assert "High" in prompt


def test_malformed_input_fails_before_any_model_call(fake_gemini):
    flow = get_flow("generateTestCases")
    with pytest.raises(SchemaValidationError):
        asyncio.run(flow.run({"scenario": "x", "complianceStandards": ["FDA"], "priority": "Urgent"}))
    assert fake_gemini.calls == []


def test_missing_input_field_is_a_schema_error(fake_gemini):
    with pytest.raises(SchemaValidationError):
        asyncio.run(get_flow("complianceCheck").run({"requirements": "only this"}))
    assert fake_gemini.calls == []


def test_unparseable_reply_is_a_model_output_error(fake_gemini):
    fake_gemini.reply("parseProjectDetails", "I am not JSON at all")
    with pytest.raises(ModelOutputError):
        asyncio.run(get_flow("parseProjectDetails").run({"requirements": "text"}))


def test_service_failure_is_propagated(fake_gemini):
    fake_gemini.reply("analyzeImpactOnChange", ModelServiceError("analyzeImpactOnChange", "timeout"))
    with pytest.raises(ModelServiceError):
        asyncio.run(
            get_flow("analyzeImpactOnChange").run(
                {"requirementChanges": "Description updated.", "existingTestCases": "ID: TC-1, Title: A"}
            )
        )


def test_missing_api_key_raises_model_service_error(monkeypatch):
    monkeypatch.setattr(gemini_invoker, "GEMINI_API_KEY", "")
    with pytest.raises(ModelServiceError):
        gemini_invoker.invoke_freeform_prompt("hello", flow_name="validateRequirements")


def test_unknown_model_is_rejected(monkeypatch):
    monkeypatch.setattr(gemini_invoker, "GEMINI_API_KEY", "test-key")
    with pytest.raises(ModelServiceError):
        gemini_invoker.invoke_freeform_prompt("hello", model_name="gpt-4o")


def test_prompt_file_override(fake_gemini, validation_reply, monkeypatch, tmp_path):
    template = tmp_path / "validate.txt"
    template.write_text("CUSTOM TEMPLATE {{requirements}}", encoding="utf-8")
    monkeypatch.setenv("VALIDATE_REQUIREMENTS_PROMPT_FILE", str(template))
    fake_gemini.reply("validateRequirements", validation_reply)
    asyncio.run(validate_requirements("abc"))
    assert fake_gemini.calls_for("validateRequirements")[0].startswith("CUSTOM TEMPLATE abc")


def test_describe_exposes_json_schemas():
    described = get_flow("parseScenarios").describe()
    assert described["name"] == "parseScenarios"
    assert "scenarios" in described["output_schema"]["properties"]
