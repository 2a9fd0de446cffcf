# santa_core/matcher.py
from __future__ import annotations
import logging
from typing import List, Optional, Sequence, Union

import numpy as np

from .constraints import is_valid_draw, quick_infeasibility
from .errors import MatchInfeasibleError
from .models import MatchResult, Participant
from .sampler import sample_draw
from .solver_ilp import solve_ilp
from .validation import validate_names

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10_000

RandomSource = Union[np.random.Generator, int, None]


def as_generator(rng: RandomSource) -> np.random.Generator:
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def solve(
    participants: Sequence[Participant],
    rng: RandomSource = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    fallback: bool = True,
) -> MatchResult:
    """
    Sampler first; when it runs out of attempts, the ILP either constructs a
    valid draw or proves there is none. Infeasibility is reported in
    MatchResult.error. Invalid names raise InputError.
    """
    if max_attempts <= 0:
        raise ValueError("max_attempts must be positive")
    people = list(participants)
    validate_names(people)
    gen = as_generator(rng)

    reason = quick_infeasibility(people)
    if reason:
        return MatchResult(participants=people, error=f"No valid draw: {reason}")

    assignment, attempts = sample_draw(people, gen, max_attempts)
    if assignment is not None:
        return MatchResult(participants=people, assignment=assignment,
                           attempts=attempts, strategy="sampler")

    if not fallback:
        return MatchResult(
            participants=people, attempts=attempts,
            error=f"No valid draw found in {attempts} attempts.",
        )

    logger.info("No valid draw after %d random attempts, falling back to ILP", attempts)
    assignment, err = solve_ilp(people, gen)
    if assignment is None:
        return MatchResult(participants=people, attempts=attempts,
                           error=f"No valid draw exists: {err}")
    if not is_valid_draw(people, assignment):
        return MatchResult(participants=people, attempts=attempts,
                           error="ILP returned an invalid draw.")
    return MatchResult(participants=people, assignment=assignment,
                       attempts=attempts, strategy="ilp")


def match(
    participants: Sequence[Participant],
    rng: RandomSource = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    fallback: bool = True,
) -> List[Participant]:
    """Return shuffled where shuffled[i] is whom participants[i] draws."""
    result = solve(participants, rng=rng, max_attempts=max_attempts, fallback=fallback)
    if result.assignment is None:
        raise MatchInfeasibleError(result.error or "No valid draw.")
    logger.info("Draw found for %d participants (%s, %d attempt(s))",
                len(result.participants), result.strategy, result.attempts)
    return result.assignment
