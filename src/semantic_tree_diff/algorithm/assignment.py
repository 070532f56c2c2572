"""Optimal bipartite assignment with an np.inf guard.

Wraps scipy's ``linear_sum_assignment`` so that forbidden (infinite-cost)
cells never reach the solver, which would raise ``ValueError`` on a matrix
without a finite complete assignment.  After solving, pairs that landed on
originally-forbidden cells are filtered out.

Guard value formula: ``finite_max * 2.0 + 1.0``
"""

from __future__ import annotations

import numpy as np
from scipy.optimize import linear_sum_assignment  # type: ignore[import-untyped]

__all__ = ["hungarian_match"]


def hungarian_match(
    cost_matrix: np.ndarray,
    max_cost: float | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Compute a minimum-cost bipartite assignment, skipping forbidden cells.

    Args:
        cost_matrix: 2-D cost matrix of shape ``(m, n)``.  ``np.inf`` marks
            a forbidden pair.
        max_cost: Optional ceiling.  Cells with a cost strictly above it are
            treated as forbidden, exactly like ``np.inf``.

    Returns:
        Tuple ``(row_ind, col_ind)`` of 1-D integer arrays.  Any pair whose
        original cost was forbidden is removed.  Empty arrays are returned
        when no allowed pair exists.
    """
    cost = np.asarray(cost_matrix, dtype=float)
    if cost.size == 0:
        return np.array([], dtype=int), np.array([], dtype=int)

    forbidden = np.isinf(cost)
    if max_cost is not None:
        forbidden |= cost > max_cost

    if forbidden.all():
        return np.array([], dtype=int), np.array([], dtype=int)

    # Replace forbidden cells with a guard value that dominates all allowed costs
    if forbidden.any():
        finite_max = float(cost[~forbidden].max())
        guard_value = finite_max * 2.0 + 1.0
        cost = np.where(forbidden, guard_value, cost)

    row_ind, col_ind = linear_sum_assignment(cost)

    if forbidden.any():
        keep = ~forbidden[row_ind, col_ind]
        row_ind = row_ind[keep]
        col_ind = col_ind[keep]

    return row_ind, col_ind
