"""
questplus
=========

QUEST+ Bayesian adaptive psychometric testing.

On every trial QUEST+ presents the stimulus whose response is expected to
shrink the entropy of the posterior over the psychometric-function
parameters the most, then conditions the posterior on the observed response.
Parameters and stimuli live on discrete grids, so every quantity is an exact
sum over a precomputed likelihood tensor.

----------------------------------------------------------------------
Workflow
----------------------------------------------------------------------

Core design
-----------
1. Domains (data/domain.py):
   - StimulusDomain: the candidate intensities.
   - ParameterDomain: named grids; the joint grid is their product.

2. Psychometric model (model/psychometric.py):
   - Maps (stimulus, parameters) to a probability vector over outcomes.
   - NormCDF: γ + (1 - γ - λ) Φ((x - μ) / σ), outcomes (incorrect, correct).

3. Likelihood tensor (model/likelihood.py):
   - P(outcome | stimulus, parameters) over the full grid, built once.

4. Belief state (posterior/belief.py, model/prior.py):
   - Prior = outer product of per-parameter weights.
   - Posterior updated by Bayes' rule after every trial.

5. Stimulus selection (acquisition/, trial_placement/):
   - Minimum expected posterior entropy over the stimulus grid.

6. Estimation (posterior/estimate.py):
   - Posterior mode or marginal means.

Unified import style
--------------------
Top-level:
  from questplus import QuestPlusSession, NormCDF, make_prior, build_likelihood
  from questplus import make_stimulus_domain, make_parameter_domain

Subpackages:
  from questplus.model import NormCDF, PsychometricModel, get_model
  from questplus.posterior import BeliefState, estimate, parameter_summary
  from questplus.acquisition import expected_entropy, optimize_acqf_discrete
  from questplus.trial_placement import MinEntropyPlacement, MinNEntropyPlacement
  from questplus.utils import linear_candidates, shannon_entropy

Numerics
--------
All tensors are float64 JAX arrays. Importing questplus enables JAX's x64
mode; without it JAX silently computes in float32.

----------------------------------------------------------------------
"""

import jax

jax.config.update("jax_enable_x64", True)

# Re-export subpackages for unified import style (e.g., questplus.model)
from . import acquisition as acquisition  # noqa: E402
from . import data as data  # noqa: E402
from . import errors as errors  # noqa: E402
from . import model as model  # noqa: E402
from . import posterior as posterior  # noqa: E402
from . import session as session  # noqa: E402
from . import trial_placement as trial_placement  # noqa: E402
from . import utils as utils  # noqa: E402

# Data
from .data.dataset import TrialHistory, TrialRecord  # noqa: E402
from .data.domain import (  # noqa: E402
    ParameterDomain,
    StimulusDomain,
    make_parameter_domain,
    make_stimulus_domain,
)
from .data.transforms import StimScale  # noqa: E402

# Errors
from .errors import (  # noqa: E402
    EmptyDomain,
    InvalidDistributionParameter,
    NumericalDegeneracy,
    OutcomeProbabilityInvalid,
    ParameterLengthMismatch,
    QuestPlusError,
    ShapeInvariantViolation,
)

# Model
from .model.likelihood import LikelihoodTensor, build_likelihood  # noqa: E402
from .model.prior import make_prior  # noqa: E402
from .model.psychometric import NormCDF, PsychometricModel  # noqa: E402

# Posterior
from .posterior.belief import BeliefState  # noqa: E402
from .posterior.estimate import ParamEstimationMethod  # noqa: E402

# Experiment orchestration
from .session.experiment_session import (  # noqa: E402
    PlacementConfig,
    QuestPlusSession,
    StimSelectionMethod,
)

__all__ = [
    # Domains
    "StimulusDomain",
    "ParameterDomain",
    "make_stimulus_domain",
    "make_parameter_domain",
    "StimScale",
    # Model
    "PsychometricModel",
    "NormCDF",
    "LikelihoodTensor",
    "build_likelihood",
    "make_prior",
    # Posterior
    "BeliefState",
    "ParamEstimationMethod",
    # Session orchestration
    "QuestPlusSession",
    "StimSelectionMethod",
    "PlacementConfig",
    # Trial records
    "TrialRecord",
    "TrialHistory",
    # Errors
    "QuestPlusError",
    "EmptyDomain",
    "ParameterLengthMismatch",
    "InvalidDistributionParameter",
    "OutcomeProbabilityInvalid",
    "NumericalDegeneracy",
    "ShapeInvariantViolation",
    # Subpackages
    "acquisition",
    "data",
    "errors",
    "model",
    "posterior",
    "session",
    "trial_placement",
    "utils",
]
