# santa_core/sampler.py
from __future__ import annotations
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constraints import is_valid_draw
from .models import Participant

logger = logging.getLogger(__name__)


def shuffled_copy(participants: Sequence[Participant], rng: np.random.Generator) -> List[Participant]:
    """Uniformly random reordering (numpy's permutation is a Fisher-Yates shuffle)."""
    pool = list(participants)
    order = rng.permutation(len(pool))
    return [pool[k] for k in order]


def sample_draw(
    participants: Sequence[Participant],
    rng: np.random.Generator,
    max_attempts: int,
) -> Tuple[Optional[List[Participant]], int]:
    """Generate-and-test:
    - shuffle a copy of the list
    - keep it if it passes is_valid_draw, otherwise reshuffle
    Returns (assignment or None, attempts used).
    """
    for attempt in range(1, max_attempts + 1):
        candidate = shuffled_copy(participants, rng)
        if is_valid_draw(participants, candidate):
            logger.debug("Sampler found a valid draw after %d attempt(s)", attempt)
            return candidate, attempt
    logger.debug("Sampler gave up after %d attempts", max_attempts)
    return None, max_attempts
