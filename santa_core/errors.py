# santa_core/errors.py
from __future__ import annotations


class SantaError(RuntimeError):
    """Base class for every fatal condition of a run."""


class InputError(SantaError):
    """Participant source missing, malformed or semantically invalid."""


class ConfigError(SantaError):
    """Missing or malformed settings."""


class MatchInfeasibleError(SantaError):
    """No valid assignment could be found."""


class NotificationError(SantaError):
    """Unusable message template or a failed send."""
