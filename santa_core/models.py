# santa_core/models.py
from __future__ import annotations
from typing import Iterator, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Participant(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    email: str = ""
    # names this participant may not draw (not: who may not draw them)
    cannot_draw: Tuple[str, ...] = Field(default=(), alias="cannotDraw")

    @field_validator("name")
    @classmethod
    def _name_nonempty(cls, v: str) -> str:
        v = str(v).strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("email")
    @classmethod
    def _strip_email(cls, v: str) -> str:
        return str(v or "").strip()

    @field_validator("cannot_draw", mode="before")
    @classmethod
    def _coerce_names(cls, v):
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        return tuple(str(x).strip() for x in v if str(x).strip())


class MatchResult(BaseModel):
    participants: List[Participant] = Field(default_factory=list)
    assignment: Optional[List[Participant]] = None
    attempts: int = 0
    strategy: Optional[Literal["sampler", "ilp"]] = None
    error: Optional[str] = None

    def pairs(self) -> Iterator[Tuple[Participant, Participant]]:
        """(giver, recipient) in participant list order."""
        if self.assignment is None:
            return iter(())
        return zip(self.participants, self.assignment)


class AppConfig(BaseModel):
    smtp_user: str = ""
    smtp_password: str = ""
    send_mail: bool = False
    mail_subject: str = ""
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_timeout: float = 30.0
    mail_html: bool = True
    participants_file: str = "participants.json"
    mail_body_file: str = "mail_body.html"
    max_attempts: int = 10_000
    random_seed: Optional[int] = None
    on_send_error: Literal["abort", "continue"] = "abort"
    log_level: str = "INFO"

    @field_validator("max_attempts", "smtp_port")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("random_seed")
    @classmethod
    def _non_negative_seed(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("must be a non-negative integer")
        return v

    @field_validator("smtp_timeout")
    @classmethod
    def _positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = str(v).strip().upper() or "INFO"
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {v}")
        return v
