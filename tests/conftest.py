import pytest

from santa_core.config import ENV_FIELDS


@pytest.fixture
def clean_env(monkeypatch):
    """Unset every setting; values loaded from a .env during the test are removed afterwards."""
    for var in ENV_FIELDS:
        # setenv first so undo deletes whatever load_dotenv writes later
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    return monkeypatch


class FakeSMTP:
    """Stands in for smtplib.SMTP; records every message, fails for addresses in fail_for."""
    sent = []
    connections = []
    fail_for = set()

    def __init__(self, host, port, timeout=None):
        FakeSMTP.connections.append((host, port, timeout))

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self, context=None):
        pass

    def login(self, user, password):
        self.user = user

    def send_message(self, msg):
        import smtplib
        if msg["To"] in FakeSMTP.fail_for:
            raise smtplib.SMTPRecipientsRefused({msg["To"]: (550, b"no such user")})
        FakeSMTP.sent.append(msg)


@pytest.fixture
def fake_smtp(monkeypatch):
    import smtplib
    FakeSMTP.sent = []
    FakeSMTP.connections = []
    FakeSMTP.fail_for = set()
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP
