# santa_core/constraints.py
from __future__ import annotations
from typing import Dict, Optional, Sequence, Set

from .models import Participant


def can_draw(giver: Participant, drawn: Participant) -> bool:
    if drawn.name == giver.name:
        return False
    return drawn.name not in giver.cannot_draw


def is_valid_draw(participants: Sequence[Participant], shuffled: Sequence[Participant]) -> bool:
    """
    shuffled[i] is the person participants[i] draws. Valid when nobody draws
    themselves, every exclusion holds and no two people draw each other.
    """
    if len(participants) != len(shuffled):
        return False
    for i in range(len(participants)):
        if not can_draw(participants[i], shuffled[i]):
            return False
        for j in range(len(participants)):
            if (participants[i].name == shuffled[j].name
                    and participants[j].name == shuffled[i].name):
                return False
    return True


def is_permutation(participants: Sequence[Participant], shuffled: Sequence[Participant]) -> bool:
    return sorted(p.name for p in participants) == sorted(p.name for p in shuffled)


def allowed_map(participants: Sequence[Participant]) -> Dict[str, Set[str]]:
    """giver name -> names they may draw (self and exclusions removed)."""
    return {
        g.name: {d.name for d in participants if can_draw(g, d)}
        for g in participants
    }


def quick_infeasibility(participants: Sequence[Participant]) -> Optional[str]:
    """Cheap necessary conditions. Returns a reason when no valid draw can exist."""
    n = len(participants)
    if n <= 1:
        return f"{n} participant(s): nobody can draw without drawing themselves."
    if n == 2:
        return "2 participants can only draw each other, which is a reciprocal pair."

    allowed = allowed_map(participants)
    for name, options in allowed.items():
        if not options:
            return f"{name} has nobody left to draw."
    drawable = set().union(*allowed.values())
    undrawn = [p.name for p in participants if p.name not in drawable]
    if undrawn:
        return f"Nobody may draw {', '.join(undrawn)}."
    return None
