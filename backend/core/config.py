from pydantic_settings import BaseSettings
from .env_config import (
    get_database_config,
    get_gemini_config,
    get_compliance_config,
    get_logging_config,
    env_config,
)
import os
from pathlib import Path
from dotenv import load_dotenv

# Ensure backend/.env is loaded into process env before any os.getenv calls
_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
if _ENV_PATH.exists():
    load_dotenv(_ENV_PATH, override=False)
else:
    load_dotenv(override=False)


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


class Settings(BaseSettings):
    _db_config = get_database_config()
    _gemini_config = get_gemini_config()
    _compliance_config = get_compliance_config()
    _logging_config = get_logging_config()

    DATABASE_URL: str = _db_config["DATABASE_URL"]
    DB_POOL_PRE_PING: bool = _db_config["DB_POOL_PRE_PING"].lower() == "true"
    DB_ECHO: bool = _db_config["DB_ECHO"].lower() == "true"

    GEMINI_API_KEY: str = _gemini_config["GEMINI_API_KEY"]
    GEMINI_MODEL: str = _gemini_config["GEMINI_MODEL"]
    GEMINI_TIMEOUT_SECONDS: int = int(_gemini_config["GEMINI_TIMEOUT_SECONDS"])
    GEMINI_TEMPERATURE: float = float(_gemini_config["GEMINI_TEMPERATURE"])
    GEMINI_MAX_OUTPUT_TOKENS: int = int(_gemini_config["GEMINI_MAX_OUTPUT_TOKENS"])

    ANALYSIS_COMPLIANCE_STANDARDS: str = _compliance_config["ANALYSIS_COMPLIANCE_STANDARDS"]
    TEST_COMPLIANCE_STANDARDS: str = _compliance_config["TEST_COMPLIANCE_STANDARDS"]

    IMPACT_ANALYSIS_FAILURE_POLICY: str = os.getenv("IMPACT_ANALYSIS_FAILURE_POLICY", "fail_open")

    LOG_LEVEL: str = _logging_config["LOG_LEVEL"]
    LOG_DIR: str = _logging_config["LOG_DIR"]

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:9002")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


settings = Settings()


class DatabaseConfigs:
    DATABASE_URL = settings.DATABASE_URL
    POOL_PRE_PING = settings.DB_POOL_PRE_PING
    ECHO = settings.DB_ECHO


class GeminiConfigs:
    API_KEY = settings.GEMINI_API_KEY
    DEFAULT_MODEL = settings.GEMINI_MODEL
    TIMEOUT_SECONDS = settings.GEMINI_TIMEOUT_SECONDS
    TEMPERATURE = settings.GEMINI_TEMPERATURE
    MAX_OUTPUT_TOKENS = settings.GEMINI_MAX_OUTPUT_TOKENS


class AgentLogConfigs:
    _cfg = get_logging_config()
    LOG_AGENT_SYSTEM_PROMPT = _cfg["LOG_AGENT_SYSTEM_PROMPT"].lower() == "true"
    LOG_AGENT_SYSTEM_PROMPT_MAX_LENGTH = int(_cfg["LOG_AGENT_SYSTEM_PROMPT_MAX_LENGTH"])
    LOG_AGENT_RAW_OUTPUT = _cfg["LOG_AGENT_RAW_OUTPUT"].lower() == "true"
    LOG_AGENT_RAW_OUTPUT_MAX_LENGTH = int(_cfg["LOG_AGENT_RAW_OUTPUT_MAX_LENGTH"])
    LOG_AGENT_OUTPUT_TO_FILE = _cfg["LOG_AGENT_OUTPUT_TO_FILE"].lower() == "true"


class ComplianceConfigs:
    # Standards string sent to the compliance check during requirements analysis
    ANALYSIS_STANDARDS = settings.ANALYSIS_COMPLIANCE_STANDARDS
    # Standards list sent with every test case generation
    TEST_GENERATION_STANDARDS = _split_csv(settings.TEST_COMPLIANCE_STANDARDS)


class ImpactAnalysisConfigs:
    FAIL_OPEN = "fail_open"
    FAIL_CLOSED = "fail_closed"
    FAILURE_POLICY = (
        settings.IMPACT_ANALYSIS_FAILURE_POLICY.strip().lower()
        if settings.IMPACT_ANALYSIS_FAILURE_POLICY.strip().lower() in ("fail_open", "fail_closed")
        else "fail_open"
    )


class IntakeConfigs:
    ACCEPTED_EXTENSIONS = (".txt", ".md", ".pdf", ".doc", ".docx")
    MAX_FILE_BYTES = int(os.getenv("INTAKE_MAX_FILE_BYTES", str(10 * 1024 * 1024)))
    SPEECH_FILE_PREFIX = "speech-recognition-"


class RateLimitConfigs:
    ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "120"))
    FLOW_CALLS = os.getenv("RATE_LIMIT_FLOW_CALLS", "20/minute")


class CorsConfigs:
    ORIGINS = _split_csv(settings.CORS_ORIGINS)


class HostingConfigs:
    HOST = settings.HOST
    PORT = settings.PORT
    URL = f"http://{HOST}:{PORT}"
    ENVIRONMENT = env_config.environment
