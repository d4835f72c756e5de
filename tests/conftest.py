"""
Central pytest configuration for this project.

This file is automatically discovered by pytest and is intended for:

- **Fixtures**: reusable domains, models and sessions shared across test files.
- **Test-only psychometric models**: small deterministic models used to reach
  edge cases (impossible observations, three outcomes, broken outputs).

Notes
-----
- Contributors should install the package in editable mode
  (`pip install -e ".[test]"`) so that imports are resolved consistently.
- Importing questplus first turns on JAX x64 before any array is created.
"""

import questplus  # noqa: F401  (enables float64)

import jax.numpy as jnp
import pytest
from jax.scipy.stats import norm

from questplus.data.domain import make_parameter_domain, make_stimulus_domain
from questplus.model.likelihood import build_likelihood
from questplus.model.prior import make_prior
from questplus.model.psychometric import NormCDF, PsychometricModel
from questplus.session import QuestPlusSession

# Correct-outcome likelihood at stimulus index 0, indexed [mean][sd]
GOLDEN_SLICE_STIM0 = [
    [0.577741074426414, 0.5859087329775925],
    [0.5620089876920433, 0.5700999841757994],
]

# A few further rows of the same table, {stimulus_index: [mean][sd]}
GOLDEN_ROWS = {
    1: [[0.5958846548853503, 0.6038091453058644], [0.577741074426414, 0.5859087329775925]],
    7: [[0.745, 0.745], [0.7171687365599306, 0.7190127928544292]],
    14: [[0.912258925573586, 0.9040912670224075], [0.8941153451146497, 0.8861908546941357]],
    49: [[0.989999999516572, 0.9899999947483807], [0.9899999988462997, 0.9899999887648576]],
}


class StepModel(PsychometricModel):
    """Deterministic observer: always correct at or above threshold, never below."""

    name = "step"
    parameter_names = ("threshold",)
    outcome_count = 2

    def respond(self, x, *args, **params):
        p = self.bind(args, params)
        x = jnp.asarray(x, dtype=jnp.float64)
        p_correct = jnp.where(x >= p["threshold"], 1.0, 0.0)
        return jnp.stack([1.0 - p_correct, p_correct], axis=0)


class ThreeOutcomeModel(PsychometricModel):
    """Yes / unsure / no observer with a fixed 20% unsure rate."""

    name = "three_outcome"
    parameter_names = ("mean", "sd")
    outcome_count = 3

    def respond(self, x, *args, **params):
        p = self.bind(args, params)
        p_yes = 0.8 * norm.cdf(jnp.asarray(x, dtype=jnp.float64), p["mean"], p["sd"])
        p_unsure = jnp.full_like(p_yes, 0.2)
        return jnp.stack([0.8 - p_yes, p_unsure, p_yes], axis=0)


@pytest.fixture
def stimulus_domain():
    """Stimuli 0, 1, ..., 49."""
    return make_stimulus_domain(jnp.arange(50.0))


@pytest.fixture
def parameter_domain():
    """Two means, two sds, fixed guess and lapse rate."""
    return make_parameter_domain(
        {
            "mean": [7.0, 8.0],
            "sd": [7.0, 7.5],
            "lower_asymptote": [0.5],
            "lapse_rate": [0.01],
        }
    )


@pytest.fixture
def likelihood(stimulus_domain, parameter_domain):
    return build_likelihood(stimulus_domain, parameter_domain, NormCDF())


@pytest.fixture
def prior(parameter_domain):
    return make_prior(parameter_domain)


@pytest.fixture
def session(stimulus_domain, parameter_domain, likelihood, prior):
    return QuestPlusSession(stimulus_domain, parameter_domain, likelihood, prior)


@pytest.fixture
def step_session():
    """Session whose stimulus 0 can never be answered correctly."""
    stimuli = make_stimulus_domain([0.0, 1.0, 2.0])
    params = make_parameter_domain({"threshold": [1.0, 2.0]})
    lik = build_likelihood(stimuli, params, StepModel())
    return QuestPlusSession(stimuli, params, lik, make_prior(params))
