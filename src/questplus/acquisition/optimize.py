"""
optimize.py
-----------

Selection over a discrete candidate set.

QUEST+ only ever chooses among the stimuli of a StimulusDomain, so the
continuous optimisers of a Bayesian-optimisation toolkit have no place here:
we rank precomputed scores.
"""

from __future__ import annotations

import jax.numpy as jnp


def optimize_acqf_discrete(
    scores: jnp.ndarray,
    q: int = 1,
    *,
    minimize: bool = True,
) -> tuple[jnp.ndarray, jnp.ndarray]:
    """
    Pick the ``q`` best candidates from a vector of acquisition scores.

    Parameters
    ----------
    scores : jnp.ndarray, shape (n_candidates,)
        One score per candidate.
    q : int, default=1
        Number of candidates to return.
    minimize : bool, default=True
        Lower scores are better (expected entropy). Set False for gains.

    Returns
    -------
    indices : jnp.ndarray, shape (min(q, n_candidates),)
        Candidate indices, best first. Equal scores keep ascending index order.
    values : jnp.ndarray
        Scores of the selected candidates.

    Examples
    --------
    >>> idx, val = optimize_acqf_discrete(jnp.array([0.3, 0.1, 0.1]))
    >>> int(idx[0])
    1
    """
    if q < 1:
        raise ValueError(f"q must be >= 1, got {q}")
    keys = scores if minimize else -scores
    # jnp.argsort is stable: ties keep ascending index order
    order = jnp.argsort(keys)
    top = order[:q]
    return top, scores[top]
