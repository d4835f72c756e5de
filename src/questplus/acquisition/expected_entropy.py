"""
expected_entropy.py
-------------------

Expected posterior entropy acquisition (the QUEST+ criterion).

For every candidate stimulus s:

    p(o | s)    = Σ_θ posterior[θ] * L[o, s, θ]
    post_o,s[θ] = posterior[θ] * L[o, s, θ] / p(o | s)
    E[H | s]    = Σ_o p(o | s) * H(post_o,s)

All candidates and outcomes are evaluated in one broadcast over the
likelihood tensor; hypothetical posteriors are temporaries and are never
written back to the belief.

References
----------
Watson, A. B. (2017). QUEST+: A general multidimensional Bayesian adaptive
psychometric method. Journal of Vision, 17(3):10.
"""

from __future__ import annotations

import jax.numpy as jnp

from questplus.utils.math import shannon_entropy


def _parameter_axes(likelihood_values: jnp.ndarray) -> tuple[int, ...]:
    return tuple(range(2, likelihood_values.ndim))


def predictive_outcome_probabilities(
    posterior_values: jnp.ndarray, likelihood_values: jnp.ndarray
) -> jnp.ndarray:
    """
    Marginal outcome probabilities p(o | s) under the current posterior.

    Parameters
    ----------
    posterior_values : jnp.ndarray, shape parameter_shape
    likelihood_values : jnp.ndarray, shape (outcome_count, n_stimuli, *parameter_shape)

    Returns
    -------
    jnp.ndarray, shape (outcome_count, n_stimuli)
    """
    return jnp.sum(
        likelihood_values * posterior_values, axis=_parameter_axes(likelihood_values)
    )


def expected_entropy(
    posterior_values: jnp.ndarray, likelihood_values: jnp.ndarray
) -> jnp.ndarray:
    """
    Expected entropy of the posterior after presenting each stimulus.

    Parameters
    ----------
    posterior_values : jnp.ndarray, shape parameter_shape
        Current posterior (read only).
    likelihood_values : jnp.ndarray, shape (outcome_count, n_stimuli, *parameter_shape)

    Returns
    -------
    jnp.ndarray, shape (n_stimuli,)
        E[H | s] in nats (lower = more informative).

    Notes
    -----
    Outcomes with zero predictive probability contribute nothing; their
    hypothetical posterior is taken as all zeros instead of 0/0.
    """
    param_axes = _parameter_axes(likelihood_values)
    joint = likelihood_values * posterior_values
    p_outcome = jnp.sum(joint, axis=param_axes)

    expand = p_outcome.reshape(p_outcome.shape + (1,) * len(param_axes))
    safe = jnp.where(expand > 0, expand, 1.0)
    hypothetical = jnp.where(expand > 0, joint / safe, 0.0)

    h = shannon_entropy(hypothetical, axis=param_axes)
    return jnp.sum(p_outcome * h, axis=0)


def information_gain(
    posterior_values: jnp.ndarray, likelihood_values: jnp.ndarray
) -> jnp.ndarray:
    """
    Expected entropy reduction H(posterior) - E[H | s] for each stimulus.

    Equals the mutual information between the parameters and the response.
    """
    return shannon_entropy(posterior_values) - expected_entropy(
        posterior_values, likelihood_values
    )
