"""Loading ``config.yaml`` with ``${VAR}`` placeholders resolved from the environment."""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from src.storefront.runtime.config.config_data import ConfigData

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def _resolve(expression: str) -> str:
    name, sep, fallback = expression.partition(":-")
    if sep:
        return os.getenv(name, fallback)

    name, sep, message = expression.partition(":?")
    value = os.getenv(name)
    if value is None:
        detail = message if sep else "not set"
        raise ValueError(f"Required environment variable {name}: {detail}")
    return value


def substitute_env_vars(text: str) -> str:
    """Replace every placeholder in ``text``.

    ``${NAME}`` and ``${NAME:?message}`` must be set; ``${NAME:-default}``
    falls back to ``default`` (which may be empty).
    """
    return _PLACEHOLDER.sub(lambda match: _resolve(match.group(1)), text)


def apply_environment_overrides(env_mode: str) -> None:
    """Copy ``<ENV_MODE>_FOO`` variables onto ``FOO`` before substitution.

    ``PRODUCTION_SUPABASE_URL`` therefore wins over ``SUPABASE_URL`` when
    ``APP_ENVIRONMENT=production``.
    """
    prefix = f"{env_mode.upper()}_"
    overrides = {
        name[len(prefix):]: value
        for name, value in os.environ.items()
        if name.startswith(prefix) and len(name) > len(prefix)
    }
    if overrides:
        logger.info("Applying {} overrides: {}", env_mode, sorted(overrides))
    os.environ.update(overrides)


def load_templated_yaml(file_path: Path) -> ConfigData:
    """Read, substitute and validate a config file.

    Raises:
        ValueError: a required variable is missing, or the YAML or its values are invalid.
        FileNotFoundError: ``file_path`` does not exist.
    """
    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    logger.info("Loading configuration from {} for {}", file_path, env_mode)
    apply_environment_overrides(env_mode)

    text = substitute_env_vars(Path(file_path).read_text())
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not isinstance(document, dict):
        raise ValueError(f"{file_path} does not contain a configuration mapping")

    try:
        config = ConfigData.model_validate(document.get("config") or {})
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    return resolve_backend_provider(config)


def resolve_backend_provider(config: ConfigData) -> ConfigData:
    """Fall back to the in-memory backend when Supabase credentials are missing.

    Production refuses to start without credentials instead of falling back.
    """
    backend = config.backend
    if backend.provider != "supabase":
        return config

    if backend.supabase.url and backend.supabase.anon_key:
        if not backend.supabase.service_role_key:
            logger.warning(
                "Supabase service-role key not configured; user administration is disabled"
            )
        return config

    if config.app.environment == "production":
        raise ValueError("Supabase backend selected but url/anon_key are not configured")

    logger.warning("Supabase credentials missing; using the in-memory backend")
    backend.provider = "memory"
    return config
