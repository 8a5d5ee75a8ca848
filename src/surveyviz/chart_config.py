"""Chart configuration shared by the figure builders and the word cloud.

ChartConfig is JSON-friendly: ``to_dict()`` / ``from_dict()`` round-trip,
and ``from_dict()`` is tolerant (unknown keys are logged and ignored,
malformed values fall back to defaults).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable

from surveyviz.algorithms.force_layout import ForceLayoutConfig
from surveyviz.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_COLOR_SCALE = ["#2997ff", "#35c759", "#ff2d55", "#5856d6", "#ff9500"]


def _default_margin() -> dict[str, int]:
    return {"top": 40, "right": 40, "bottom": 60, "left": 60}


@dataclass
class ChartConfig:
    """Configuration for all survey charts."""
    width: int = 600
    height: int = 400
    margin: dict[str, int] = field(default_factory=_default_margin)
    color_scale: list[str] = field(default_factory=lambda: list(DEFAULT_COLOR_SCALE))
    primary_color: str = "#2997ff"
    transition_duration_ms: int = 1000
    histogram_bin_width: int = 1            # years per age-histogram bin
    work_bucket_width: int = 15             # years per work-music bar
    violin_bandwidth: float = 2.0           # Epanechnikov bandwidth, in hours
    violin_points: int = 50                 # evaluation points across the hours axis
    violin_domain: tuple[float, float] = (0.0, 24.0)
    word_min_size: float = 30.0
    word_size_scale: float = 5.0
    word_padding: float = 10.0
    word_cloud_seed: int | None = None
    force_layout: ForceLayoutConfig = field(default_factory=ForceLayoutConfig)

    @property
    def inner_width(self) -> int:
        return self.width - self.margin["left"] - self.margin["right"]

    @property
    def inner_height(self) -> int:
        return self.height - self.margin["top"] - self.margin["bottom"]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict."""
        return {
            "width": self.width,
            "height": self.height,
            "margin": dict(self.margin),
            "color_scale": list(self.color_scale),
            "primary_color": self.primary_color,
            "transition_duration_ms": self.transition_duration_ms,
            "histogram_bin_width": self.histogram_bin_width,
            "work_bucket_width": self.work_bucket_width,
            "violin_bandwidth": self.violin_bandwidth,
            "violin_points": self.violin_points,
            "violin_domain": list(self.violin_domain),
            "word_min_size": self.word_min_size,
            "word_size_scale": self.word_size_scale,
            "word_padding": self.word_padding,
            "word_cloud_seed": self.word_cloud_seed,
            "force_layout": self.force_layout.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChartConfig":
        """Deserialize from a dict.

        Unknown keys are ignored with a warning; a value that cannot be
        converted keeps the default and logs a warning.
        """
        defaults = cls()
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                logger.warning(f"Unknown key '{key}' in chart config, ignoring")

        def get(key: str, convert: Callable[[Any], Any]) -> Any:
            default = getattr(defaults, key)
            if key not in data:
                return default
            try:
                return convert(data[key])
            except (TypeError, ValueError):
                logger.warning(f"Invalid value {data[key]!r} for '{key}', using default {default!r}")
                return default

        def to_margin(v: Any) -> dict[str, int]:
            margin = _default_margin()
            margin.update({str(k): int(x) for k, x in dict(v).items()})
            return margin

        def to_domain(v: Any) -> tuple[float, float]:
            lo, hi = v
            return (float(lo), float(hi))

        def to_seed(v: Any) -> int | None:
            return None if v is None else int(v)

        def to_force_layout(v: Any) -> ForceLayoutConfig:
            if not isinstance(v, dict):
                raise TypeError("force_layout must be a dict")
            return ForceLayoutConfig.from_dict(v)

        return cls(
            width=get("width", int),
            height=get("height", int),
            margin=get("margin", to_margin),
            color_scale=get("color_scale", lambda v: [str(c) for c in v]),
            primary_color=get("primary_color", str),
            transition_duration_ms=get("transition_duration_ms", int),
            histogram_bin_width=get("histogram_bin_width", int),
            work_bucket_width=get("work_bucket_width", int),
            violin_bandwidth=get("violin_bandwidth", float),
            violin_points=get("violin_points", int),
            violin_domain=get("violin_domain", to_domain),
            word_min_size=get("word_min_size", float),
            word_size_scale=get("word_size_scale", float),
            word_padding=get("word_padding", float),
            word_cloud_seed=get("word_cloud_seed", to_seed),
            force_layout=get("force_layout", to_force_layout),
        )
