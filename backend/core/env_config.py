import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class EnvConfig:
    """
    Minimal environment configuration helpers. Provides typed getters for the
    database, Gemini, compliance and logging settings.
    """

    def __init__(self) -> None:
        # Environment name (default/local/dev/qa/prod)
        self.environment = os.getenv("ENVIRONMENT", "default")


env_config = EnvConfig()


def get_env_variable(key: str, default: str | None = None) -> str:
    return os.getenv(key, default or "")


def get_config_value(key: str, default: str | None = None) -> str:
    return get_env_variable(key, default)


def get_bool_env(key: str, default: bool = False) -> bool:
    return os.getenv(key, "true" if default else "false").strip().lower() in ("1", "true", "yes")


def get_database_config() -> dict:
    return {
        "DATABASE_URL": os.getenv("DATABASE_URL", "sqlite:///./reqguard.db"),
        "DB_POOL_PRE_PING": os.getenv("DB_POOL_PRE_PING", "true"),
        "DB_ECHO": os.getenv("DB_ECHO", "false"),
    }


def get_gemini_config() -> dict:
    return {
        "GEMINI_API_KEY": os.getenv("GEMINI_API_KEY", ""),
        "GEMINI_MODEL": os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        "GEMINI_TIMEOUT_SECONDS": os.getenv("GEMINI_TIMEOUT_SECONDS", "120"),
        "GEMINI_TEMPERATURE": os.getenv("GEMINI_TEMPERATURE", "0.2"),
        "GEMINI_MAX_OUTPUT_TOKENS": os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "8192"),
    }


def get_compliance_config() -> dict:
    return {
        "ANALYSIS_COMPLIANCE_STANDARDS": os.getenv(
            "ANALYSIS_COMPLIANCE_STANDARDS", "FDA, GDPR, ISO 13485, HIPAA"
        ),
        "TEST_COMPLIANCE_STANDARDS": os.getenv("TEST_COMPLIANCE_STANDARDS", "FDA,GDPR"),
    }


def get_logging_config() -> dict:
    return {
        "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO"),
        "LOG_DIR": os.getenv("LOG_DIR", ""),
        "LOG_AGENT_SYSTEM_PROMPT": os.getenv("LOG_AGENT_SYSTEM_PROMPT", "true"),
        "LOG_AGENT_SYSTEM_PROMPT_MAX_LENGTH": os.getenv("LOG_AGENT_SYSTEM_PROMPT_MAX_LENGTH", "2000"),
        "LOG_AGENT_RAW_OUTPUT": os.getenv("LOG_AGENT_RAW_OUTPUT", "true"),
        "LOG_AGENT_RAW_OUTPUT_MAX_LENGTH": os.getenv("LOG_AGENT_RAW_OUTPUT_MAX_LENGTH", "4000"),
        "LOG_AGENT_OUTPUT_TO_FILE": os.getenv("LOG_AGENT_OUTPUT_TO_FILE", "false"),
    }
