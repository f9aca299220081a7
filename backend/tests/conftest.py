"""
Shared fixtures.

Environment is set before any application module is imported: a throwaway
SQLite database, a temporary log directory, rate limiting off and no Gemini
key, so an unpatched model call fails instead of reaching the network.
"""

import json
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="reqguard-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["GEMINI_API_KEY"] = ""
os.environ["LOG_AGENT_OUTPUT_TO_FILE"] = "false"
os.environ["IMPACT_ANALYSIS_FAILURE_POLICY"] = "fail_open"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from db.session import SessionLocal, engine  # noqa: E402
from models.base import Base  # noqa: E402
from services.llm.errors import ModelServiceError  # noqa: E402
from services.llm.gemini import gemini_invoker  # noqa: E402
from services.workspace.workspace_service import workspace_registry  # noqa: E402


class FakeGemini:
    """Stands in for the Gemini call; replies are configured per flow name."""

    def __init__(self):
        self.replies = {}
        self.calls = []

    def reply(self, flow_name, value):
        self.replies[flow_name] = value

    def calls_for(self, flow_name):
        return [prompt for name, prompt in self.calls if name == flow_name]

    async def __call__(self, prompt, model_name=None, api_key=None, flow_name="gemini", timeout_seconds=None):
        self.calls.append((flow_name, prompt))
        value = self.replies.get(flow_name)
        if value is None:
            raise ModelServiceError(flow_name, "no reply configured")
        if isinstance(value, Exception):
            raise value
        if callable(value):
            value = value(prompt)
        if not isinstance(value, str):
            value = json.dumps(value)
        return value


@pytest.fixture
def fake_gemini(monkeypatch):
    fake = FakeGemini()
    monkeypatch.setattr(gemini_invoker, "invoke_freeform_prompt_async", fake)
    return fake


@pytest.fixture(autouse=True)
def clean_state():
    Base.metadata.create_all(bind=engine)
    workspace_registry.clear()
    yield
    workspace_registry.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    from main import app

    return TestClient(app)


@pytest.fixture
def validation_reply():
    return {
        "completenessValidation": {
            "isValid": False,
            "missingElements": [
                {"element": "Audit logging", "reason": "HIPAA requires access to PHI to be traceable."}
            ],
        }
    }


@pytest.fixture
def compliance_reply():
    return {
        "complianceReport": "Password policy is not specified.",
        "suggestions": "Define password complexity and lockout rules.",
    }


@pytest.fixture
def project_details_reply():
    return {
        "appName": "CarePortal",
        "objective": "Let patients access their records securely.",
        "features": ["Login", "Record viewer"],
        "techStack": ["Python", "PostgreSQL"],
    }


@pytest.fixture
def scenarios_reply():
    return {
        "scenarios": [
            {
                "reqId": "REQ-001",
                "title": "User login",
                "description": "The system must allow users to log in with email and password",
                "requirementType": "Functional",
                "requirementSource": "Uploaded Document",
                "priority": "Medium",
            }
        ]
    }


@pytest.fixture
def testcases_reply():
    return {
        "testCases": [
            {
                "testCaseId": "TC-001",
                "title": "Valid login",
                "steps": ["Open login page", "Enter valid credentials", "Submit"],
                "expectedResult": "User lands on the dashboard",
                "complianceTags": ["FDA", "GDPR"],
                "priority": "High",
                "confidenceLevel": "High",
            },
            {
                "testCaseId": "TC-002",
                "title": "Invalid password",
                "steps": ["Open login page", "Enter a wrong password", "Submit"],
                "expectedResult": "An error message is shown",
                "complianceTags": ["GDPR"],
                "priority": "Medium",
                "confidenceLevel": "Medium",
            },
        ]
    }
