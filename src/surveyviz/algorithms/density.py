"""
Kernel density estimation for violin silhouettes.

A density curve is the mean of kernel bumps centred on each sample,
evaluated at a fixed grid of points chosen by the caller:

    density(x) = mean(kernel(x - s) for s in samples)

The only kernel used by the charts is Epanechnikov with bandwidth 2 over
50 points of the hours axis, but any callable ``float -> float`` works.
Kernels that also map numpy arrays (like ``EpanechnikovKernel``) are
evaluated once over the whole offset matrix.
"""

from __future__ import annotations

from typing import Callable, NamedTuple, Sequence, Union

import numpy as np

from surveyviz.utils.logging import get_logger

logger = get_logger(__name__)

Kernel = Callable[[float], float]


class EmptySampleSetError(ValueError):
    """Raised when a density is requested for zero samples."""


class InvalidBandwidthError(ValueError):
    """Raised when a kernel bandwidth is not strictly positive."""


class DensityPoint(NamedTuple):
    x: float
    density: float


class EpanechnikovKernel:
    """Parabolic kernel with compact support ``[-k, k]``.

    ``kernel(v) = 0.75 * (1 - (v/k)**2) / k`` when ``|v/k| <= 1``, else 0.
    Accepts a scalar or a numpy array.
    """

    def __init__(self, bandwidth: float) -> None:
        if not bandwidth > 0:
            raise InvalidBandwidthError(f"Kernel bandwidth must be > 0, got {bandwidth!r}")
        self.bandwidth = float(bandwidth)

    def __call__(self, v: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        u = np.asarray(v, dtype=float) / self.bandwidth
        out = np.where(np.abs(u) <= 1.0, 0.75 * (1.0 - u * u) / self.bandwidth, 0.0)
        if out.ndim == 0:
            return float(out)
        return out

    def __repr__(self) -> str:
        return f"EpanechnikovKernel(bandwidth={self.bandwidth})"


def evaluation_grid(lo: float, hi: float, count: int = 50) -> list[float]:
    """Return ``count`` evenly spaced points over ``[lo, hi]``."""
    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")
    return np.linspace(lo, hi, count).tolist()


class DensityEstimator:
    """Evaluate a kernel density over a fixed grid.

    Args:
        kernel: Pure function of the offset ``x - sample``.
        evaluation_points: Grid of x positions; fixed for the estimator's lifetime.
    """

    def __init__(self, kernel: Kernel, evaluation_points: Sequence[float]) -> None:
        self.kernel = kernel
        self.evaluation_points = tuple(float(x) for x in evaluation_points)

    def estimate(self, samples: Sequence[float]) -> list[DensityPoint]:
        """Return one DensityPoint per evaluation point, in order.

        The kernel is evaluated once on the full ``points x samples`` offset
        matrix. Kernels that only take scalars are called per offset instead.

        Raises:
            EmptySampleSetError: If ``samples`` is empty.
        """
        values = np.asarray([float(s) for s in samples], dtype=float)
        if values.size == 0:
            raise EmptySampleSetError("Cannot estimate a density from an empty sample set")

        offsets = np.subtract.outer(np.asarray(self.evaluation_points, dtype=float), values)
        densities = self._kernel_matrix(offsets).mean(axis=1)

        logger.debug(f"estimated density over {len(densities)} points from {values.size} samples")
        return [DensityPoint(x, float(d)) for x, d in zip(self.evaluation_points, densities)]

    def _kernel_matrix(self, offsets: np.ndarray) -> np.ndarray:
        try:
            weights = np.asarray(self.kernel(offsets), dtype=float)
        except (TypeError, ValueError):
            weights = None
        if weights is not None and weights.shape == offsets.shape:
            return weights

        logger.debug(f"kernel {self.kernel!r} does not map arrays, evaluating per offset")
        return np.array(
            [[float(self.kernel(float(v))) for v in row] for row in offsets],
            dtype=float,
        ).reshape(offsets.shape)


def kernel_density_estimate(
    kernel: Kernel,
    evaluation_points: Sequence[float],
    samples: Sequence[float],
) -> list[DensityPoint]:
    """One-shot form of ``DensityEstimator(kernel, evaluation_points).estimate(samples)``."""
    return DensityEstimator(kernel, evaluation_points).estimate(samples)
