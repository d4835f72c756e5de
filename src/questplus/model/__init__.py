"""
questplus.model
===============

Model-layer API: everything that turns domains into probabilities.

Includes
--------
- Psychometric models (PsychometricModel base, NormCDF, MODELS registry)
- Prior construction (make_prior)
- Likelihood tensor (LikelihoodTensor, build_likelihood)

All tensors are JAX arrays (jax.numpy as jnp), float64.

Typical usage
-------------
    from questplus.model import NormCDF, build_likelihood, make_prior
"""

from .likelihood import LikelihoodTensor, build_likelihood
from .prior import make_prior
from .psychometric import MODELS, NormCDF, PsychometricModel, get_model, simulate_response

__all__ = [
    # Psychometric models
    "PsychometricModel",
    "NormCDF",
    "MODELS",
    "get_model",
    "simulate_response",
    # Prior
    "make_prior",
    # Likelihood
    "LikelihoodTensor",
    "build_likelihood",
]
