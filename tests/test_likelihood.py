"""
test_likelihood.py
------------------

Tests for likelihood-tensor construction.
"""

import jax.numpy as jnp
import pytest
from conftest import GOLDEN_ROWS, GOLDEN_SLICE_STIM0, ThreeOutcomeModel

from questplus.data.domain import make_parameter_domain, make_stimulus_domain
from questplus.errors import (
    InvalidDistributionParameter,
    InvalidOutcome,
    OutcomeProbabilityInvalid,
    ParameterNotFound,
    ShapeInvariantViolation,
    UnknownStimulus,
)
from questplus.model.likelihood import LikelihoodTensor, build_likelihood
from questplus.model.psychometric import NormCDF, PsychometricModel


class NotNormalizedModel(PsychometricModel):
    name = "not_normalized"
    parameter_names = ("a",)
    outcome_count = 2

    def respond(self, x, *args, **params):
        p = self.bind(args, params)
        x = jnp.asarray(x) + 0.0 * p["a"]
        return jnp.stack([jnp.full_like(x, 0.5), jnp.full_like(x, 0.6)])


class NegativeModel(PsychometricModel):
    name = "negative"
    parameter_names = ("a",)
    outcome_count = 2

    def respond(self, x, *args, **params):
        p = self.bind(args, params)
        x = jnp.asarray(x) + 0.0 * p["a"]
        return jnp.stack([jnp.full_like(x, -0.2), jnp.full_like(x, 1.2)])


class WrongShapeModel(PsychometricModel):
    name = "wrong_shape"
    parameter_names = ("a",)
    outcome_count = 2

    def respond(self, x, *args, **params):
        p = self.bind(args, params)
        x = jnp.asarray(x) + 0.0 * p["a"]
        third = jnp.full_like(x, 1.0 / 3.0)
        return jnp.stack([third, third, third])


class TestBuildLikelihood:
    def test_shape(self, likelihood):
        assert likelihood.shape == (2, 50, 2, 2, 1, 1)
        assert likelihood.outcome_count == 2

    def test_golden_slice_stimulus_zero(self, likelihood):
        got = likelihood.values[NormCDF.CORRECT, 0, :, :, 0, 0]
        assert jnp.allclose(got, jnp.array(GOLDEN_SLICE_STIM0), atol=1e-8)

    @pytest.mark.parametrize("stimulus_index", sorted(GOLDEN_ROWS))
    def test_golden_rows(self, likelihood, stimulus_index):
        got = likelihood.values[NormCDF.CORRECT, stimulus_index, :, :, 0, 0]
        assert jnp.allclose(got, jnp.array(GOLDEN_ROWS[stimulus_index]), atol=1e-8)

    def test_outcome_axis_sums_to_one(self, likelihood):
        assert jnp.allclose(jnp.sum(likelihood.values, axis=0), 1.0, atol=1e-12)

    def test_slice(self, likelihood):
        s = likelihood.slice(NormCDF.CORRECT, 0)
        assert s.shape == (2, 2, 1, 1)
        assert jnp.allclose(s[:, :, 0, 0], jnp.array(GOLDEN_SLICE_STIM0), atol=1e-8)

    def test_slice_bad_indices(self, likelihood):
        with pytest.raises(InvalidOutcome):
            likelihood.slice(2, 0)
        with pytest.raises(UnknownStimulus):
            likelihood.slice(0, 50)

    def test_parameter_order_does_not_matter(self, stimulus_domain):
        """Domain axes follow declaration order, not the model's argument order."""
        reordered = make_parameter_domain(
            {"sd": [7.0, 7.5], "lapse_rate": [0.01], "mean": [7.0, 8.0], "lower_asymptote": [0.5]}
        )
        lik = build_likelihood(stimulus_domain, reordered, NormCDF())
        assert lik.shape == (2, 50, 2, 1, 2, 1)
        # [sd][mean] is the transpose of the golden [mean][sd]
        got = lik.values[NormCDF.CORRECT, 0, :, 0, :, 0]
        assert jnp.allclose(got, jnp.array(GOLDEN_SLICE_STIM0).T, atol=1e-8)

    def test_stimulus_scale_reaches_model(self, parameter_domain):
        logged = make_stimulus_domain([1.0, 10.0, 100.0], scale="log10")
        linear = make_stimulus_domain([0.0, 1.0, 2.0])
        a = build_likelihood(logged, parameter_domain, NormCDF())
        b = build_likelihood(linear, parameter_domain, NormCDF())
        assert jnp.allclose(a.values, b.values)

    def test_three_outcomes(self, stimulus_domain):
        params = make_parameter_domain({"mean": [10.0, 20.0, 30.0], "sd": [2.0, 5.0]})
        lik = build_likelihood(stimulus_domain, params, ThreeOutcomeModel())
        assert lik.shape == (3, 50, 3, 2)
        assert jnp.allclose(jnp.sum(lik.values, axis=0), 1.0)


class TestBuildLikelihoodErrors:
    def test_parameter_names_must_match_model(self, stimulus_domain):
        params = make_parameter_domain({"mu": [7.0], "sd": [7.0], "lower_asymptote": [0.5], "lapse_rate": [0.01]})
        with pytest.raises(ParameterNotFound):
            build_likelihood(stimulus_domain, params, NormCDF())

    def test_missing_parameter(self, stimulus_domain):
        params = make_parameter_domain({"mean": [7.0], "sd": [7.0]})
        with pytest.raises(ParameterNotFound):
            build_likelihood(stimulus_domain, params, NormCDF())

    def test_invalid_sd_on_grid(self, stimulus_domain):
        params = make_parameter_domain(
            {"mean": [7.0], "sd": [0.0, 1.0], "lower_asymptote": [0.5], "lapse_rate": [0.01]}
        )
        with pytest.raises(InvalidDistributionParameter):
            build_likelihood(stimulus_domain, params, NormCDF())

    def test_negative_probability(self, stimulus_domain):
        params = make_parameter_domain({"a": [1.0, 2.0]})
        with pytest.raises(OutcomeProbabilityInvalid):
            build_likelihood(stimulus_domain, params, NegativeModel())

    @pytest.mark.parametrize(
        "gamma, lapse",
        [(1.2, 0.0), (0.5, -0.1), (0.8, 0.5)],
    )
    def test_asymptotes_out_of_range_on_grid(self, stimulus_domain, gamma, lapse):
        """Guess and lapse rates that would invert the function are rejected."""
        params = make_parameter_domain(
            {"mean": [7.0], "sd": [7.0], "lower_asymptote": [0.5, gamma], "lapse_rate": [lapse]}
        )
        with pytest.raises(InvalidDistributionParameter):
            build_likelihood(stimulus_domain, params, NormCDF())

    def test_not_normalized(self, stimulus_domain):
        params = make_parameter_domain({"a": [1.0, 2.0]})
        with pytest.raises(OutcomeProbabilityInvalid):
            build_likelihood(stimulus_domain, params, NotNormalizedModel())

    def test_wrong_outcome_count(self, stimulus_domain):
        params = make_parameter_domain({"a": [1.0, 2.0]})
        with pytest.raises(ShapeInvariantViolation):
            build_likelihood(stimulus_domain, params, WrongShapeModel())

    def test_direct_construction_checks_shape(self, stimulus_domain, parameter_domain):
        with pytest.raises(ShapeInvariantViolation):
            LikelihoodTensor(
                values=jnp.ones((2, 3)),
                stimulus_domain=stimulus_domain,
                parameter_domain=parameter_domain,
                model=NormCDF(),
            )
