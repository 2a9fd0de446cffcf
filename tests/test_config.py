# FILE: tests/test_config.py
import pytest

from santa_core.config import config_from_mapping, load_config, parse_bool
from santa_core.errors import ConfigError

def test_parse_bool_spellings():
    for v in ["1", "t", "T", "TRUE", "true", "True"]:
        assert parse_bool(v) is True
    for v in ["0", "f", "F", "FALSE", "false", "False"]:
        assert parse_bool(v) is False
    with pytest.raises(ValueError):
        parse_bool("yes")

def test_dry_run_config_defaults():
    cfg = config_from_mapping({"SENDMAIL": "false", "MAIL_SUBJECT": "Ho ho ho"})
    assert cfg.send_mail is False
    assert cfg.mail_subject == "Ho ho ho"
    assert cfg.smtp_host == "smtp.gmail.com"
    assert cfg.smtp_port == 587
    assert cfg.max_attempts == 10_000
    assert cfg.random_seed is None
    assert cfg.on_send_error == "abort"

def test_numbers_are_parsed():
    cfg = config_from_mapping({"SENDMAIL": "0", "SMTP_PORT": "2525", "RANDOM_SEED": "9", "MAX_ATTEMPTS": "50"})
    assert (cfg.smtp_port, cfg.random_seed, cfg.max_attempts) == (2525, 9, 50)

def test_non_boolean_toggle():
    with pytest.raises(ConfigError, match="SENDMAIL: invalid boolean"):
        config_from_mapping({"SENDMAIL": "maybe"})

def test_missing_toggle():
    with pytest.raises(ConfigError, match="SENDMAIL is not set"):
        config_from_mapping({})

def test_flag_overrides_missing_toggle():
    cfg = config_from_mapping({}, overrides={"send_mail": False, "random_seed": None})
    assert cfg.send_mail is False

def test_live_run_requires_credentials():
    with pytest.raises(ConfigError) as exc:
        config_from_mapping({"SENDMAIL": "true"})
    assert "SMTP_USER is required" in str(exc.value)
    assert "SMTP_PASSWORD is required" in str(exc.value)

def test_every_problem_reported():
    with pytest.raises(ConfigError) as exc:
        config_from_mapping({"SENDMAIL": "false", "SMTP_PORT": "abc", "ON_SEND_ERROR": "retry", "MAX_ATTEMPTS": "0"})
    msg = str(exc.value)
    assert "SMTP_PORT" in msg and "ON_SEND_ERROR" in msg and "MAX_ATTEMPTS" in msg

def test_load_config_reads_env_file(tmp_path, clean_env):
    env_file = tmp_path / ".env"
    env_file.write_text("SENDMAIL=true\nSMTP_USER=santa@example.com\nSMTP_PASSWORD=secret\n", encoding="utf-8")
    cfg = load_config(env_file=str(env_file))
    assert cfg.send_mail is True
    assert cfg.smtp_user == "santa@example.com"

def test_load_config_missing_env_file(tmp_path):
    with pytest.raises(ConfigError, match="env file not found"):
        load_config(env_file=str(tmp_path / "absent.env"))

def test_negative_seed_is_config_error():
    with pytest.raises(ConfigError, match="RANDOM_SEED: .*non-negative"):
        config_from_mapping({"SENDMAIL": "false", "RANDOM_SEED": "-1"})
    with pytest.raises(ConfigError, match="RANDOM_SEED"):
        config_from_mapping({"SENDMAIL": "false"}, overrides={"random_seed": -3})
    assert config_from_mapping({"SENDMAIL": "false", "RANDOM_SEED": "0"}).random_seed == 0
