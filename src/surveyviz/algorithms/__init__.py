"""Algorithms behind the survey charts.

density: kernel density estimation for violin silhouettes.
force_layout: particle simulation that keeps word-cloud labels apart.
survey_stats: pure pandas/numpy aggregations, one per chart.
"""

from surveyviz.algorithms.density import (
    DensityEstimator,
    DensityPoint,
    EmptySampleSetError,
    EpanechnikovKernel,
    InvalidBandwidthError,
    evaluation_grid,
    kernel_density_estimate,
)
from surveyviz.algorithms.force_layout import (
    Dragging,
    ForceLayoutConfig,
    ForceLayoutSimulator,
    Free,
    NonPositiveMassError,
    Particle,
    settle,
)

__all__ = [
    "DensityEstimator",
    "DensityPoint",
    "Dragging",
    "EmptySampleSetError",
    "EpanechnikovKernel",
    "ForceLayoutConfig",
    "ForceLayoutSimulator",
    "Free",
    "InvalidBandwidthError",
    "NonPositiveMassError",
    "Particle",
    "evaluation_grid",
    "kernel_density_estimate",
    "settle",
]
