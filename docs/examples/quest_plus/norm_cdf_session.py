"""
QUEST+ example: estimate a normal-CDF psychometric function online
------------------------------------------------------------------

This script runs a complete simulated adaptive experiment:

1. Define the stimulus menu and the parameter grid (threshold, slope,
   guess rate, lapse rate).
2. Let QuestPlusSession pick each stimulus by minimum expected posterior
   entropy.
3. Simulate an observer with known parameters θ* and feed its responses
   back into the session.
4. Report the posterior summary and compare to θ*.

For each trial, the model computes:
    p_correct = γ + (1 - γ - λ) * Φ((x - mean) / sd)

where y ∈ {0,1} is a binary response (1 = correct, 0 = incorrect).
"""

from __future__ import annotations

import os
import sys

import jax.random as jr
import numpy as np

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../../../src")))
# --8<-- [start:imports]
from questplus import NormCDF, QuestPlusSession
from questplus.model.psychometric import simulate_response
from questplus.posterior.diagnostics import print_parameter_summary

# --8<-- [end:imports]

N_TRIALS = 64

# 1) Grids
print("[1/3] Building likelihood table...")
# --8<-- [start:session]
session = QuestPlusSession.from_model(
    stimuli=np.arange(-10.0, 10.5, 0.5),
    parameters={
        "mean": np.arange(-6.0, 6.5, 0.5),
        "sd": [0.5, 1.0, 2.0, 3.0],
        "lower_asymptote": 0.5,
        "lapse_rate": [0.0, 0.02, 0.05],
    },
    selection_method="min_entropy",
    estimation_method="mean",
)
# --8<-- [end:session]
print(session)

# 2) Simulated experiment
truth = {"mean": 1.5, "sd": 2.0, "lower_asymptote": 0.5, "lapse_rate": 0.02}
observer = NormCDF()
key = jr.PRNGKey(0)

print(f"[2/3] Running {N_TRIALS} simulated trials...")
# --8<-- [start:loop]
for trial in range(N_TRIALS):
    key, subkey = jr.split(key)
    x = session.next_stimulus()
    y = simulate_response(observer, x, truth, subkey, scale=session.stimulus_domain.scale)
    session.update(x, y)
    if (trial + 1) % 16 == 0:
        print(f"  trial {trial + 1:3d}: x={x:+.1f} y={y} H={session.entropy:.3f}")
# --8<-- [end:loop]

# 3) Results
print("[3/3] Posterior summary")
print_parameter_summary(session.posterior)
print("true :", truth)
print("mode :", session.estimate("mode"))
print("mean :", session.estimate("mean"))
