"""Genre word cloud: spiral packing plus the force-layout simulation.

Words are sized by their share of responses (``genre_word_sizes``), packed
around the origin on an Archimedean spiral so no two text boxes overlap,
and then handed to a ForceLayoutSimulator that keeps them drifting apart.
Coordinates are centred: (0, 0) is the middle of the cloud and y grows
downward, as on screen.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

import pandas as pd

from surveyviz.algorithms.force_layout import ForceLayoutSimulator, Particle
from surveyviz.algorithms.survey_stats import genre_word_sizes
from surveyviz.chart_config import ChartConfig
from surveyviz.figures import word_cloud_figure
from surveyviz.utils.logging import get_logger

logger = get_logger(__name__)

# Approximate glyph width as a fraction of the font size.
CHAR_WIDTH = 0.6

# Spiral parameter increment per placement attempt.
SPIRAL_STEP = 0.1


def text_box(text: str, size: float, padding: float = 0.0) -> tuple[float, float]:
    """Approximate (width, height) of ``text`` rendered at font ``size``."""
    return CHAR_WIDTH * size * len(text) + padding, size + padding


def _overlaps(box: tuple[float, float, float, float], placed: list[tuple[float, float, float, float]]) -> bool:
    x0, y0, x1, y1 = box
    for a0, b0, a1, b1 in placed:
        if x0 < a1 and a0 < x1 and y0 < b1 and b0 < y1:
            return True
    return False


def spiral_layout(
    words: Sequence[tuple[str, float]],
    width: float,
    height: float,
    *,
    padding: float = 10.0,
) -> list[tuple[str, float, float, float]]:
    """
    Place ``(text, size)`` words without overlap inside a ``width`` x ``height`` box.

    Words are placed largest first, each one walking outward from the centre
    along ``(e * t * cos t, t * sin t)`` with ``e = width / height`` until its
    padded box fits. Words that do not fit anywhere are dropped with a
    warning.

    Returns:
        ``(text, x, y, size)`` tuples in placement order.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Layout area must be positive, got {width} x {height}")

    eccentricity = width / height
    max_t = math.hypot(width, height)
    half_w, half_h = width / 2, height / 2
    boxes: list[tuple[float, float, float, float]] = []
    placed: list[tuple[str, float, float, float]] = []

    for text, size in sorted(words, key=lambda w: -w[1]):
        w, h = text_box(text, size, padding)
        t = 0.0
        spot: Optional[tuple[float, float]] = None
        while t <= max_t:
            x = eccentricity * t * math.cos(t)
            y = t * math.sin(t)
            box = (x - w / 2, y - h / 2, x + w / 2, y + h / 2)
            inside = box[0] >= -half_w and box[2] <= half_w and box[1] >= -half_h and box[3] <= half_h
            if inside and not _overlaps(box, boxes):
                spot = (x, y)
                boxes.append(box)
                break
            t += SPIRAL_STEP
        if spot is None:
            logger.warning(f"word {text!r} (size {size:.1f}) does not fit in {width}x{height}, dropped")
            continue
        placed.append((text, spot[0], spot[1], size))

    return placed


class WordCloud:
    """Word cloud model: word table, packed positions and the live simulator.

    Args:
        words: Frame with at least columns text and size (see genre_word_sizes).
        config: Chart configuration; the cloud area is the chart's inner
            width by 1.5 times its inner height.
    """

    def __init__(self, words: pd.DataFrame, config: Optional[ChartConfig] = None) -> None:
        self.config = config or ChartConfig()
        self.words = words.reset_index(drop=True)
        self.width = float(self.config.inner_width)
        self.height = float(self.config.inner_height) * 1.5

        placed = spiral_layout(
            list(zip(self.words["text"].astype(str), self.words["size"].astype(float))),
            self.width,
            self.height,
            padding=self.config.word_padding,
        )
        self.simulator = ForceLayoutSimulator.from_labels(
            placed,
            seed=self.config.word_cloud_seed,
            config=self.config.force_layout,
        )
        self._by_label = {p.label: p for p in self.simulator.particles}
        logger.info(f"word cloud built with {len(placed)} of {len(self.words)} words")

    @classmethod
    def from_frame(cls, df: pd.DataFrame, config: Optional[ChartConfig] = None) -> "WordCloud":
        """Build from the raw survey frame (favourite genre column)."""
        config = config or ChartConfig()
        words = genre_word_sizes(df, min_size=config.word_min_size, scale=config.word_size_scale)
        return cls(words, config)

    def particle(self, label: str) -> Particle:
        return self._by_label[label]

    def tick(self) -> None:
        self.simulator.tick()

    def begin_drag(self, label: str, pointer: Sequence[float]) -> None:
        self.simulator.begin_drag(self.particle(label), pointer)

    def drag(self, label: str, pointer: Sequence[float]) -> None:
        self.simulator.drag(self.particle(label), pointer)

    def end_drag(self, label: str) -> None:
        self.simulator.end_drag(self.particle(label))

    def figure(self) -> dict:
        """Plotly figure dict of the current positions."""
        return word_cloud_figure(self.simulator.particles, self.config, extent=(self.width, self.height))
