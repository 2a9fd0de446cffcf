# FILE: santa_core/validation.py
from __future__ import annotations
from typing import List, Sequence

from email_validator import EmailNotValidError, validate_email

from .errors import InputError
from .models import Participant

MIN_PARTICIPANTS = 2


def check_names(participants: Sequence[Participant]) -> List[str]:
    """Name uniqueness and exclusion references. The matcher relies on both."""
    errs: List[str] = []
    seen = set()
    dupes: List[str] = []
    for p in participants:
        if p.name in seen and p.name not in dupes:
            dupes.append(p.name)
        seen.add(p.name)
    if dupes:
        errs.append(f"Duplicate participant names: {', '.join(dupes)}")

    for p in participants:
        if p.name in p.cannot_draw:
            errs.append(f"{p.name} lists themselves in cannotDraw.")
        unknown = [n for n in p.cannot_draw if n not in seen]
        if unknown:
            errs.append(f"{p.name} excludes unknown participants: {', '.join(unknown)}")
    return errs


def check_participants(participants: Sequence[Participant], require_email: bool = True) -> List[str]:
    """
    Collect every problem with the participant list. Empty list means valid.
    Email addresses are only required when messages will actually be sent.
    """
    errs: List[str] = []
    if len(participants) < MIN_PARTICIPANTS:
        errs.append(f"Need at least {MIN_PARTICIPANTS} participants, got {len(participants)}.")
    errs.extend(check_names(participants))
    if require_email:
        for p in participants:
            if not p.email:
                errs.append(f"{p.name} has no email address.")
                continue
            try:
                validate_email(p.email, check_deliverability=False)
            except EmailNotValidError as exc:
                errs.append(f"{p.name} has an invalid email address {p.email!r}: {exc}")
    return errs


def _raise_if(errs: List[str]) -> None:
    if errs:
        raise InputError("Invalid participant list:\n  - " + "\n  - ".join(errs))


def validate_names(participants: Sequence[Participant]) -> None:
    _raise_if(check_names(participants))


def validate_participants(participants: Sequence[Participant], require_email: bool = True) -> None:
    _raise_if(check_participants(participants, require_email=require_email))
