# santa_core/solver_ilp.py
from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np
import pulp

from .constraints import can_draw
from .models import Participant


def solve_ilp(
    participants: Sequence[Participant],
    rng: np.random.Generator,
) -> Tuple[Optional[List[Participant]], Optional[str]]:
    """Constructive fallback. Finds a valid draw whenever one exists.

    x[i,j] = 1 when participant i draws participant j. Random objective weights
    from rng pick one of the feasible draws.
    """
    n = len(participants)
    if n == 0:
        return None, "No participants."

    prob = pulp.LpProblem("secret_santa_draw", pulp.LpMaximize)

    # Decision variables only for allowed pairs (covers self draws and exclusions)
    X: Dict[Tuple[int, int], pulp.LpVariable] = {}
    for i, giver in enumerate(participants):
        for j, drawn in enumerate(participants):
            if can_draw(giver, drawn):
                X[(i, j)] = pulp.LpVariable(f"x_{i}_{j}", cat="Binary")

    for i, giver in enumerate(participants):
        if not any((i, j) in X for j in range(n)):
            return None, f"{giver.name} has nobody left to draw."
    for j, drawn in enumerate(participants):
        if not any((i, j) in X for i in range(n)):
            return None, f"Nobody may draw {drawn.name}."

    weights = rng.uniform(0.0, 1.0, size=(n, n))
    prob += pulp.lpSum(float(weights[i, j]) * var for (i, j), var in X.items())

    # 1) Everyone draws exactly one person
    for i in range(n):
        prob += pulp.lpSum(X[(i, j)] for j in range(n) if (i, j) in X) == 1, f"gives_{i}"

    # 2) Everyone is drawn exactly once
    for j in range(n):
        prob += pulp.lpSum(X[(i, j)] for i in range(n) if (i, j) in X) == 1, f"receives_{j}"

    # 3) No reciprocal pairs
    for (i, j), var in X.items():
        if i < j and (j, i) in X:
            prob += var + X[(j, i)] <= 1, f"norecip_{i}_{j}"

    status = prob.solve(pulp.PULP_CBC_CMD(msg=False))
    if pulp.LpStatus[status] != "Optimal":
        return None, f"ILP solver status: {pulp.LpStatus[status]}"

    assignment: List[Participant] = []
    for i in range(n):
        found = None
        for j in range(n):
            var = X.get((i, j))
            if var is not None and pulp.value(var) > 0.5:
                found = participants[j]
                break
        if found is None:
            return None, f"ILP solution left {participants[i].name} without a draw."
        assignment.append(found)
    return assignment, None
