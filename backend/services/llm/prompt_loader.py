import importlib
import logging
import os

from core.env_config import get_env_variable

logger = logging.getLogger(__name__)


def load_prompt(env_prefix: str, default_module: str) -> str:
    """
    Resolve a prompt template.

    Lookup order:
        1. <PREFIX>_PROMPT_FILE: path of a text file holding the template
        2. <PREFIX>_PROMPT_MODULE (+ optional <PREFIX>_PROMPT_ATTR): importable module
        3. the module docstring of `default_module`

    Args:
        env_prefix: Environment variable prefix, e.g. "PARSE_SCENARIOS"
        default_module: Dotted path of the bundled prompt module

    Returns:
        The template text (may contain {placeholders})
    """
    prompt_file = get_env_variable(f"{env_prefix}_PROMPT_FILE", "").strip()
    if prompt_file:
        if os.path.exists(prompt_file):
            with open(prompt_file, "r", encoding="utf-8") as f:
                return f.read()
        logger.warning("prompt_loader: %s_PROMPT_FILE=%s does not exist, using bundled prompt", env_prefix, prompt_file)

    mod_path = get_env_variable(f"{env_prefix}_PROMPT_MODULE", "").strip()
    if mod_path:
        attr_name = get_env_variable(f"{env_prefix}_PROMPT_ATTR", "").strip()
        try:
            mod = importlib.import_module(mod_path)
            val = getattr(mod, attr_name, None) if attr_name else None
            if val is None:
                val = getattr(mod, "__doc__", "") or ""
            if val:
                return str(val)
        except ImportError as e:
            logger.warning("prompt_loader: cannot import %s_PROMPT_MODULE=%s: %s", env_prefix, mod_path, e)

    mod = importlib.import_module(default_module)
    return mod.__doc__ or ""
