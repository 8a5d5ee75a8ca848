"""
surveyviz: statistical charts for the music & mental health survey.

This package provides:
- DensityEstimator / EpanechnikovKernel: kernel density curves for violins
- ForceLayoutSimulator: particle simulation that keeps word-cloud labels apart
- survey_stats: one pandas aggregation per chart
- figures: Plotly figure dicts for every chart
- WordCloud: spiral packing plus the live simulation
- Logging utilities for library and application use

For logging configuration in standalone scripts/demos:
    ```python
    from surveyviz.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from surveyviz.utils.logging import configure_logging, get_logger

from surveyviz.algorithms.density import (
    DensityEstimator,
    DensityPoint,
    EmptySampleSetError,
    EpanechnikovKernel,
    InvalidBandwidthError,
    kernel_density_estimate,
)
from surveyviz.algorithms.force_layout import (
    ForceLayoutConfig,
    ForceLayoutSimulator,
    NonPositiveMassError,
    Particle,
)
from surveyviz.chart_config import ChartConfig

# NullHandler so library logs stay silent until an application configures logging.
_logger = logging.getLogger("surveyviz")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "ChartConfig",
    "DensityEstimator",
    "DensityPoint",
    "EmptySampleSetError",
    "EpanechnikovKernel",
    "ForceLayoutConfig",
    "ForceLayoutSimulator",
    "InvalidBandwidthError",
    "NonPositiveMassError",
    "Particle",
    "configure_logging",
    "get_logger",
    "kernel_density_estimate",
]

__version__ = "0.1.0"
