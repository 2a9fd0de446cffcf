# santa_core/config.py
from __future__ import annotations
import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from .errors import ConfigError
from .models import AppConfig

logger = logging.getLogger(__name__)

# ===== Environment variable -> AppConfig field =====
ENV_FIELDS = {
    "SMTP_USER": "smtp_user",
    "SMTP_PASSWORD": "smtp_password",
    "SENDMAIL": "send_mail",
    "MAIL_SUBJECT": "mail_subject",
    "SMTP_HOST": "smtp_host",
    "SMTP_PORT": "smtp_port",
    "SMTP_TIMEOUT": "smtp_timeout",
    "MAIL_HTML": "mail_html",
    "PARTICIPANTS_FILE": "participants_file",
    "MAIL_BODY_FILE": "mail_body_file",
    "MAX_ATTEMPTS": "max_attempts",
    "RANDOM_SEED": "random_seed",
    "ON_SEND_ERROR": "on_send_error",
    "LOG_LEVEL": "log_level",
}
FIELD_ENV = {field: var for var, field in ENV_FIELDS.items()}

BOOL_FIELDS = {"send_mail", "mail_html"}
REQUIRED_FIELDS = ["send_mail"]

# Accepted toggle spellings; anything else is a configuration error
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def parse_bool(value: str) -> bool:
    v = str(value).strip()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"invalid boolean {value!r}")


def config_from_mapping(env: Mapping[str, str], overrides: Optional[Dict[str, Any]] = None) -> AppConfig:
    """
    Build AppConfig from an environment-like mapping plus explicit overrides
    (command-line flags; None values are ignored). Raises ConfigError listing
    every problem.
    """
    errs: List[str] = []
    values: Dict[str, Any] = {}

    for var, field in ENV_FIELDS.items():
        raw = env.get(var)
        if raw is None or str(raw).strip() == "":
            continue
        if field in BOOL_FIELDS:
            try:
                values[field] = parse_bool(raw)
            except ValueError as exc:
                errs.append(f"{var}: {exc}")
        elif field == "smtp_password":
            values[field] = raw
        else:
            values[field] = str(raw).strip()

    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    for field in REQUIRED_FIELDS:
        if field not in values and not any(e.startswith(FIELD_ENV[field] + ":") for e in errs):
            errs.append(f"{FIELD_ENV[field]} is not set")

    cfg = None
    try:
        cfg = AppConfig(**values)
    except ValidationError as exc:
        for e in exc.errors():
            loc = ".".join(str(x) for x in e.get("loc", ()))
            errs.append(f"{FIELD_ENV.get(loc, loc)}: {e.get('msg')}")

    if cfg is not None and cfg.send_mail:
        if not cfg.smtp_user:
            errs.append("SMTP_USER is required when SENDMAIL is true")
        if not cfg.smtp_password:
            errs.append("SMTP_PASSWORD is required when SENDMAIL is true")

    if errs:
        raise ConfigError("Invalid configuration:\n  - " + "\n  - ".join(errs))
    return cfg


def load_config(env_file: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> AppConfig:
    """Read .env (if present) into the process environment, then validate."""
    if env_file:
        if not os.path.exists(env_file):
            raise ConfigError(f"env file not found: {env_file}")
        load_dotenv(env_file)
    else:
        load_dotenv(find_dotenv(usecwd=True))
    cfg = config_from_mapping(os.environ, overrides)
    logger.debug("Configuration loaded (send_mail=%s, host=%s)", cfg.send_mail, cfg.smtp_host)
    return cfg
