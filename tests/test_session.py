"""
test_session.py
---------------

End-to-end tests for QuestPlusSession: selection, update, estimation,
failure handling, replay and simulated observers.
"""

import logging
import math

import jax.numpy as jnp
import jax.random as jr
import pytest
from conftest import GOLDEN_SLICE_STIM0

from questplus import QuestPlusSession
from questplus.data.domain import make_parameter_domain, make_stimulus_domain
from questplus.errors import (
    InvalidDistributionParameter,
    InvalidOutcome,
    NumericalDegeneracy,
    ShapeInvariantViolation,
    UnknownStimulus,
)
from questplus.model.prior import make_prior
from questplus.model.psychometric import NormCDF, simulate_response
from questplus.posterior.belief import BeliefState
from questplus.session import PlacementConfig, StimSelectionMethod
from questplus.trial_placement import MinEntropyPlacement, MinNEntropyPlacement

GOLDEN_PARAMETERS = {
    "mean": [7.0, 8.0],
    "sd": [7.0, 7.5],
    "lower_asymptote": [0.5],
    "lapse_rate": [0.01],
}


class TestConstruction:
    def test_posterior_starts_as_prior(self, session, prior):
        assert jnp.allclose(session.posterior.values, prior.values)
        assert session.posterior is not prior
        assert abs(float(jnp.sum(session.posterior.values)) - 1.0) < 1e-8
        assert len(session) == 0

    def test_prior_is_not_shared(self, session, prior, likelihood):
        session.update(0.0, NormCDF.CORRECT)
        assert jnp.allclose(prior.values, 0.25)
        assert jnp.allclose(session.prior.values, 0.25)

    def test_from_model_golden(self):
        session = QuestPlusSession.from_model(range(50), GOLDEN_PARAMETERS)
        got = session.likelihood.values[NormCDF.CORRECT, 0, :, :, 0, 0]
        assert jnp.allclose(got, jnp.array(GOLDEN_SLICE_STIM0), atol=1e-8)
        assert isinstance(session.placement, MinEntropyPlacement)

    def test_from_model_with_prior_weights(self):
        session = QuestPlusSession.from_model(
            range(50), GOLDEN_PARAMETERS, prior_weights={"mean": [3.0, 1.0]}
        )
        assert jnp.allclose(session.posterior.marginal("mean"), jnp.array([0.75, 0.25]))

    def test_from_model_rejects_inverted_function(self):
        parameters = dict(GOLDEN_PARAMETERS, lower_asymptote=[0.8], lapse_rate=[0.5])
        with pytest.raises(InvalidDistributionParameter):
            QuestPlusSession.from_model(range(50), parameters)

    def test_mismatched_prior(self, stimulus_domain, parameter_domain, likelihood):
        other = make_parameter_domain(
            {"mean": [1.0, 2.0], "sd": [7.0, 7.5], "lower_asymptote": [0.5], "lapse_rate": [0.01]}
        )
        with pytest.raises(ShapeInvariantViolation):
            QuestPlusSession(stimulus_domain, parameter_domain, likelihood, make_prior(other))

    def test_mismatched_stimulus_domain(self, parameter_domain, likelihood, prior):
        with pytest.raises(ShapeInvariantViolation):
            QuestPlusSession(make_stimulus_domain([1.0, 2.0]), parameter_domain, likelihood, prior)

    def test_method_strings(self, stimulus_domain, parameter_domain, likelihood, prior):
        session = QuestPlusSession(
            stimulus_domain,
            parameter_domain,
            likelihood,
            prior,
            selection_method="min_n_entropy",
            estimation_method="mean",
            placement_config=PlacementConfig(n=3, seed=1),
        )
        assert session.selection_method is StimSelectionMethod.MIN_N_ENTROPY
        assert isinstance(session.placement, MinNEntropyPlacement)
        assert session.placement.n == 3

    def test_unknown_selection_method(self, stimulus_domain, parameter_domain, likelihood, prior):
        with pytest.raises(ValueError):
            QuestPlusSession(
                stimulus_domain, parameter_domain, likelihood, prior, selection_method="max_fun"
            )

    @pytest.mark.parametrize("kwargs", [{"n": 0}, {"max_consecutive_reps": 0}])
    def test_placement_config_validation(self, kwargs):
        with pytest.raises(ValueError):
            PlacementConfig(**kwargs)


class TestNextStimulus:
    def test_value_in_domain(self, session):
        x = session.next_stimulus()
        assert x in list(session.stimulus_domain)

    def test_repeatable_without_update(self, session):
        assert session.next_stimulus() == session.next_stimulus()
        assert session.next_stimulus_index() == session.next_stimulus_index()

    def test_expected_entropies_materialize_on_first_call(self, session):
        assert session.expected_entropies is None
        session.next_stimulus()
        scores = session.expected_entropies
        assert scores.shape == (50,)
        assert float(scores[session.next_stimulus_index()]) == float(jnp.min(scores))

    def test_does_not_change_posterior(self, session):
        before = session.posterior.values
        session.next_stimulus()
        assert jnp.array_equal(session.posterior.values, before)


class TestUpdate:
    def test_update_by_value(self, session):
        session.update(0.0, NormCDF.CORRECT)
        lik = jnp.array(GOLDEN_SLICE_STIM0)
        assert jnp.allclose(session.posterior.values[:, :, 0, 0], lik / jnp.sum(lik), atol=1e-12)
        assert session.history.trials[0] == (0, 0.0, 1)

    def test_update_by_index(self, session):
        session.update(7, NormCDF.INCORRECT, by_index=True)
        assert session.history.stimulus_indices == [7]
        assert session.history.stimuli == [7.0]

    def test_posterior_normalized_after_every_update(self, session):
        for i in range(15):
            x = session.next_stimulus()
            session.update(x, i % 2)
            assert abs(float(jnp.sum(session.posterior.values)) - 1.0) < 1e-8
        assert len(session.history) == 15

    def test_update_skips_entropy_when_debug_off(self, session, monkeypatch, caplog):
        calls = []
        original = BeliefState.entropy
        monkeypatch.setattr(BeliefState, "entropy", lambda self: calls.append(1) or original(self))
        caplog.set_level(logging.INFO, logger="questplus")
        session.update(0.0, NormCDF.CORRECT)
        assert calls == []

    def test_update_logs_trial_at_debug(self, session, caplog):
        caplog.set_level(logging.DEBUG, logger="questplus")
        session.update(3.0, NormCDF.INCORRECT)
        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("trial 1: stimulus=3 outcome=0") for m in messages)
        assert any(m.startswith("belief updated: stimulus_index=3") for m in messages)

    def test_unknown_value(self, session):
        with pytest.raises(UnknownStimulus):
            session.update(123.5, 1)
        assert len(session.history) == 0

    def test_unknown_index(self, session):
        with pytest.raises(UnknownStimulus):
            session.update(50, 1, by_index=True)

    def test_invalid_outcome_leaves_session(self, session):
        before = session.posterior.values
        with pytest.raises(InvalidOutcome):
            session.update(0.0, 2)
        assert jnp.array_equal(session.posterior.values, before)
        assert len(session.history) == 0

    def test_numerical_degeneracy(self, step_session):
        """Stimulus 0 is below every threshold: 'correct' is impossible."""
        before = step_session.posterior.values
        with pytest.raises(NumericalDegeneracy):
            step_session.update(0.0, 1)
        assert jnp.array_equal(step_session.posterior.values, before)
        assert len(step_session.history) == 0

    def test_step_observer_resolves_threshold(self, step_session):
        step_session.update(1.0, 0)  # incorrect at 1 -> threshold must be 2
        assert step_session.estimate() == {"threshold": 2.0}
        assert step_session.entropy == 0.0


class TestEstimate:
    def test_default_method(self, session):
        assert session.estimate() == session.estimate("mode")
        assert session.estimate() == {
            "mean": 7.0,
            "sd": 7.0,
            "lower_asymptote": 0.5,
            "lapse_rate": 0.01,
        }

    def test_mean_of_uniform_prior(self, session):
        est = session.estimate("mean")
        assert est["mean"] == pytest.approx(7.5)
        assert est["sd"] == pytest.approx(7.25)
        assert est["lower_asymptote"] == pytest.approx(0.5)
        assert est["lapse_rate"] == pytest.approx(0.01)


class TestReplay:
    def test_replay_reproduces_posterior(self, session, stimulus_domain, parameter_domain, likelihood, prior):
        for i in range(8):
            session.update(session.next_stimulus(), int(i % 3 == 0))

        fresh = QuestPlusSession(stimulus_domain, parameter_domain, likelihood, prior)
        fresh.replay(session.history)
        assert jnp.allclose(fresh.posterior.values, session.posterior.values, atol=1e-14)
        assert fresh.history.trials == session.history.trials

    def test_replay_pairs(self, session):
        session.replay([(0, 1), (10, 0)])
        assert session.history.stimulus_indices == [0, 10]
        assert session.history.outcomes == [1, 0]


class TestSimulatedObserver:
    @pytest.mark.parametrize("selection_method", ["min_entropy", "min_n_entropy"])
    def test_converges_towards_true_threshold(self, selection_method):
        truth = {"mean": 20.0, "sd": 2.0, "lower_asymptote": 0.5, "lapse_rate": 0.01}
        session = QuestPlusSession.from_model(
            stimuli=jnp.arange(0.0, 40.0, 1.0),
            parameters={
                "mean": jnp.arange(4.0, 37.0, 4.0),
                "sd": [1.0, 2.0, 4.0],
                "lower_asymptote": [0.5],
                "lapse_rate": [0.01],
            },
            selection_method=selection_method,
        )
        initial_entropy = session.entropy
        assert math.isclose(initial_entropy, math.log(27.0))

        key = jr.PRNGKey(2024)
        for _ in range(60):
            key, subkey = jr.split(key)
            x = session.next_stimulus()
            y = simulate_response(NormCDF(), x, truth, subkey, scale=session.stimulus_domain.scale)
            session.update(x, y)

        assert len(session.history) == 60
        assert session.entropy < initial_entropy - 1.0
        assert abs(session.estimate("mean")["mean"] - 20.0) <= 4.0

    def test_log_scale_session(self):
        session = QuestPlusSession.from_model(
            stimuli=[1.0, 10.0, 100.0, 1000.0],
            parameters={"mean": [1.0, 2.0], "sd": [0.5], "lower_asymptote": 0.5, "lapse_rate": 0.0},
            stim_scale="log10",
        )
        x = session.next_stimulus()
        assert x in (1.0, 10.0, 100.0, 1000.0)
        session.update(x, 1)
        assert abs(float(jnp.sum(session.posterior.values)) - 1.0) < 1e-8
