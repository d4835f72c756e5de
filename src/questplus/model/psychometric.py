"""
psychometric.py
---------------

Psychometric models: stimulus intensity + parameters -> outcome probabilities.

Each PsychometricModel defines:
- parameter_names
    Names of the latent parameters, in the order respond() takes them.
- outcome_count
    Number of distinct responses (2 for correct/incorrect).
- respond(x, **params)
    Probability vector over outcomes. Inputs broadcast against each other, so
    the likelihood builder can evaluate the whole grid in one call.

Implemented:
- NormCDF: cumulative-normal psychometric function with guess and lapse rate.

The set of models is closed and enumerable through MODELS / get_model().
New models subclass PsychometricModel and are registered in MODELS.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

import jax
import jax.numpy as jnp
import jax.random as jr
from jax.scipy.stats import norm

from questplus.data.transforms import StimScale, to_model_scale
from questplus.errors import InvalidDistributionParameter, UnknownModel


class PsychometricModel(ABC):
    """
    Abstract base class for psychometric models.
    """

    name: str = ""
    parameter_names: tuple[str, ...] = ()
    outcome_count: int = 2

    @abstractmethod
    def respond(self, x: Any, *args: Any, **params: Any) -> jnp.ndarray:
        """
        Outcome probabilities for stimulus ``x`` under the given parameters.

        Returns
        -------
        jnp.ndarray, shape (outcome_count, *broadcast_shape)
            Probabilities along axis 0, summing to 1 for every cell.
        """
        ...

    def bind(self, args: tuple, params: Mapping[str, Any]) -> dict[str, jnp.ndarray]:
        """Merge positional and keyword parameters into a name -> array dict."""
        if len(args) > len(self.parameter_names):
            raise TypeError(
                f"{type(self).__name__}.respond() takes at most "
                f"{len(self.parameter_names)} parameters, got {len(args)}"
            )
        bound = dict(zip(self.parameter_names, args))
        for key, value in params.items():
            if key in bound:
                raise TypeError(f"parameter '{key}' given twice")
            bound[key] = value
        missing = [n for n in self.parameter_names if n not in bound]
        extra = [n for n in bound if n not in self.parameter_names]
        if missing or extra:
            raise TypeError(
                f"{type(self).__name__}.respond() expects parameters "
                f"{list(self.parameter_names)}; missing {missing}, unexpected {extra}"
            )
        return {k: jnp.asarray(v, dtype=jnp.float64) for k, v in bound.items()}

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NormCDF(PsychometricModel):
    """
    Cumulative-normal psychometric function.

    P(correct | x) = γ + (1 - γ - λ) * Φ((x - μ) / σ)

    Parameters (passed to respond)
    ------------------------------
    mean : μ, location (threshold)
    sd : σ, spread; must be > 0
    lower_asymptote : γ, guess rate
    lapse_rate : λ, lapse rate

    Outcomes
    --------
    Index 0 = incorrect, index 1 = correct (same coding as 0/1 responses).

    Examples
    --------
    >>> model = NormCDF()
    >>> p = model.respond(0.0, 7.0, 7.0, 0.5, 0.01)
    >>> float(p[NormCDF.CORRECT])
    0.577741074426414
    """

    name = "norm_cdf"
    parameter_names = ("mean", "sd", "lower_asymptote", "lapse_rate")
    outcome_count = 2

    INCORRECT = 0
    CORRECT = 1

    def respond(self, x: Any, *args: Any, **params: Any) -> jnp.ndarray:
        """
        Outcome probabilities (incorrect, correct) stacked on axis 0.

        Raises
        ------
        InvalidDistributionParameter
            If any ``sd`` is <= 0, any parameter is non-finite, γ or λ lies
            outside [0, 1], or γ + λ > 1.
        """
        p = self.bind(args, params)
        x = jnp.asarray(x, dtype=jnp.float64)
        sd = p["sd"]
        if bool(jnp.any(sd <= 0)):
            raise InvalidDistributionParameter("sd must be > 0")
        for name, value in p.items():
            if not bool(jnp.all(jnp.isfinite(value))):
                raise InvalidDistributionParameter(f"{name} must be finite")

        gamma = p["lower_asymptote"]
        lapse = p["lapse_rate"]
        for name, value in (("lower_asymptote", gamma), ("lapse_rate", lapse)):
            if bool(jnp.any((value < 0) | (value > 1))):
                raise InvalidDistributionParameter(f"{name} must lie in [0, 1]")
        if bool(jnp.any(gamma + lapse > 1)):
            raise InvalidDistributionParameter("lower_asymptote + lapse_rate must be <= 1")
        p_correct = gamma + (1.0 - gamma - lapse) * norm.cdf(x, loc=p["mean"], scale=sd)
        return jnp.stack([1.0 - p_correct, p_correct], axis=0)


# Closed registry of available models
MODELS: dict[str, type[PsychometricModel]] = {
    NormCDF.name: NormCDF,
}


def get_model(name: str, **kwargs: Any) -> PsychometricModel:
    """
    Instantiate a registered psychometric model by name.

    Raises
    ------
    UnknownModel
        If ``name`` is not in MODELS.
    """
    try:
        cls = MODELS[name]
    except KeyError:
        raise UnknownModel(
            f"unknown psychometric model '{name}'; available: {sorted(MODELS)}"
        ) from None
    return cls(**kwargs)


def simulate_response(
    model: PsychometricModel,
    x: float,
    params: Mapping[str, float],
    key: jax.Array,
    scale: StimScale | str = StimScale.LINEAR,
) -> int:
    """
    Draw one outcome from a simulated observer.

    Parameters
    ----------
    model : PsychometricModel
    x : float
        Presented stimulus value in physical units, as returned by
        QuestPlusSession.next_stimulus().
    params : mapping
        True observer parameters, keyed by model.parameter_names.
    key : jax.Array
        PRNG key.
    scale : StimScale or str, default="linear"
        Scale of the session's stimulus domain; ``x`` is mapped onto the
        model axis with it before the model is evaluated.

    Returns
    -------
    int
        Sampled outcome index.
    """
    probs = jnp.ravel(model.respond(to_model_scale(x, scale), **params))
    return int(jr.choice(key, model.outcome_count, p=probs))
