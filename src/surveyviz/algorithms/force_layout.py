"""
Force-directed layout for floating word-cloud labels.

Each label is a Particle with a mass proportional to its font size. One call
to ``ForceLayoutSimulator.tick()`` advances every particle by one step:

1. Pairwise, against every other particle q at least ``min_distance`` away:
   repulsion ``(m_p + m_q) * 800 / d**2`` scaled by
   ``1 / m_p`` pushes p away, attraction ``d * 0.00003`` pulls it back.
   Pairs closer than ``min_distance`` (3) are skipped entirely.
2. Centering: a constant pull of 0.04 toward ``center``, direction only.
3. Damping: velocity *= 0.99.
4. Integration: position += velocity.

Particles being dragged skip all of that and ease toward the pointer
instead: ``v = (pointer + offset - p) * 0.3; p += v``. Releasing doubles the
velocity once so the label is flicked back into the simulation.

All pairwise forces within one tick read the positions of the previous
tick; new positions are committed after the whole pass, so the order of the
particles never changes the trajectory.

The simulator never schedules itself. Callers (a test loop, ``settle()``,
or a UI timer) decide when to tick.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Optional, Sequence, Union

import numpy as np

from surveyviz.utils.logging import get_logger

logger = get_logger(__name__)

Point = tuple[float, float]


class NonPositiveMassError(ValueError):
    """Raised when a particle is constructed with ``mass <= 0``."""


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ForceLayoutConfig:
    """Constants of the simulation. Set a strength to 0 to switch a force off."""
    min_distance: float = 3.0
    repulsion: float = 800.0
    attraction: float = 0.00003
    centering: float = 0.04
    damping: float = 0.99
    drag_gain: float = 0.3
    release_boost: float = 2.0
    center: Point = (0.0, 0.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "min_distance": self.min_distance,
            "repulsion": self.repulsion,
            "attraction": self.attraction,
            "centering": self.centering,
            "damping": self.damping,
            "drag_gain": self.drag_gain,
            "release_boost": self.release_boost,
            "center": list(self.center),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ForceLayoutConfig":
        """Build from a dict.

        Missing keys keep their defaults and unknown keys are ignored. A value
        that cannot be converted keeps its default and logs a warning.
        """
        defaults = cls()

        def get(key: str, convert: Callable[[Any], Any]) -> Any:
            default = getattr(defaults, key)
            if key not in data:
                return default
            try:
                return convert(data[key])
            except (TypeError, ValueError):
                logger.warning(f"Invalid value {data[key]!r} for '{key}', using default {default!r}")
                return default

        def to_point(v: Any) -> Point:
            cx, cy = v
            return (float(cx), float(cy))

        return cls(
            min_distance=get("min_distance", float),
            repulsion=get("repulsion", float),
            attraction=get("attraction", float),
            centering=get("centering", float),
            damping=get("damping", float),
            drag_gain=get("drag_gain", float),
            release_boost=get("release_boost", float),
            center=get("center", to_point),
        )


# -----------------------------------------------------------------------------
# Particles and drag state
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Free:
    """Particle follows the physics."""


@dataclass(frozen=True)
class Dragging:
    """Particle follows the pointer.

    offset: particle position minus pointer position at drag start.
    pointer: latest pointer position.
    """
    offset: Point
    pointer: Point


FREE = Free()

DragState = Union[Free, Dragging]


@dataclass(eq=False)
class Particle:
    """One floating label. Compared and hashed by identity."""
    label: str
    x: float
    y: float
    mass: float
    vx: float = 0.0
    vy: float = 0.0
    state: DragState = field(default=FREE)

    def __post_init__(self) -> None:
        if not self.mass > 0:
            raise NonPositiveMassError(f"Particle {self.label!r} must have mass > 0, got {self.mass!r}")

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    @property
    def velocity(self) -> Point:
        return (self.vx, self.vy)

    @property
    def is_dragging(self) -> bool:
        return isinstance(self.state, Dragging)


# -----------------------------------------------------------------------------
# Simulator
# -----------------------------------------------------------------------------


class ForceLayoutSimulator:
    """Owns a fixed set of particles and advances them one tick at a time."""

    def __init__(
        self,
        particles: Iterable[Particle],
        config: Optional[ForceLayoutConfig] = None,
    ) -> None:
        self._particles: tuple[Particle, ...] = tuple(particles)
        self._index: dict[int, int] = {id(p): i for i, p in enumerate(self._particles)}
        if len(self._index) != len(self._particles):
            raise ValueError("The same Particle object was passed more than once")
        self._masses = np.array([p.mass for p in self._particles], dtype=float)
        self.config = config or ForceLayoutConfig()
        self.tick_count = 0

    @classmethod
    def from_labels(
        cls,
        labels: Iterable[tuple[str, float, float, float]],
        *,
        seed: Optional[int] = None,
        config: Optional[ForceLayoutConfig] = None,
    ) -> "ForceLayoutSimulator":
        """Build particles from ``(label, x, y, size)`` tuples.

        Initial velocities are drawn uniformly from ``[-1, 1)`` per axis with
        ``numpy.random.default_rng(seed)``; ``size`` becomes the mass.
        """
        rng = np.random.default_rng(seed)
        particles = []
        for label, x, y, size in labels:
            vx, vy = (rng.random(2) - 0.5) * 2.0
            particles.append(Particle(str(label), float(x), float(y), float(size), vx=float(vx), vy=float(vy)))
        return cls(particles, config=config)

    @property
    def particles(self) -> tuple[Particle, ...]:
        return self._particles

    def __len__(self) -> int:
        return len(self._particles)

    def positions(self) -> list[tuple[str, float, float]]:
        """Current ``(label, x, y)`` of every particle, in construction order."""
        return [(p.label, p.x, p.y) for p in self._particles]

    def kinetic_energy(self) -> float:
        """``sum(0.5 * m * |v|**2)`` over all particles."""
        if not self._particles:
            return 0.0
        vel = np.array([p.velocity for p in self._particles], dtype=float)
        return float(0.5 * np.sum(self._masses * np.sum(vel * vel, axis=1)))

    # -------------------------------------------------------------------------
    # Stepping
    # -------------------------------------------------------------------------

    def tick(self) -> None:
        """Advance every particle by one step (see module docstring)."""
        self.tick_count += 1
        n = len(self._particles)
        if n == 0:
            return

        cfg = self.config
        pos = np.array([p.position for p in self._particles], dtype=float)
        vel = np.array([p.velocity for p in self._particles], dtype=float)
        mass = self._masses

        # delta[i, j] = pos[j] - pos[i]
        delta = pos[np.newaxis, :, :] - pos[:, np.newaxis, :]
        dist = np.hypot(delta[..., 0], delta[..., 1])
        active = dist >= cfg.min_distance
        np.fill_diagonal(active, False)
        safe_dist = np.where(active, dist, 1.0)

        unit = delta / safe_dist[..., np.newaxis]
        combined = mass[:, np.newaxis] + mass[np.newaxis, :]
        repulsion = combined * cfg.repulsion / (safe_dist * safe_dist)
        attraction = safe_dist * cfg.attraction
        coeff = np.where(active, attraction - repulsion / mass[:, np.newaxis], 0.0)
        dv = np.sum(unit * coeff[..., np.newaxis], axis=1)

        to_center = np.asarray(cfg.center, dtype=float)[np.newaxis, :] - pos
        center_dist = np.hypot(to_center[:, 0], to_center[:, 1])
        has_offset = center_dist > 0
        safe_center = np.where(has_offset, center_dist, 1.0)
        pull = np.where(
            has_offset[:, np.newaxis],
            to_center / safe_center[:, np.newaxis] * cfg.centering,
            0.0,
        )

        new_vel = (vel + dv + pull) * cfg.damping
        new_pos = pos + new_vel

        for i, p in enumerate(self._particles):
            state = p.state
            if isinstance(state, Dragging):
                tx = state.pointer[0] + state.offset[0]
                ty = state.pointer[1] + state.offset[1]
                p.vx = (tx - p.x) * cfg.drag_gain
                p.vy = (ty - p.y) * cfg.drag_gain
                p.x += p.vx
                p.y += p.vy
            else:
                p.vx, p.vy = float(new_vel[i, 0]), float(new_vel[i, 1])
                p.x, p.y = float(new_pos[i, 0]), float(new_pos[i, 1])

    def run(self, ticks: int) -> None:
        """Call ``tick()`` ``ticks`` times."""
        for _ in range(ticks):
            self.tick()

    # -------------------------------------------------------------------------
    # Drag control
    # -------------------------------------------------------------------------

    def _owned(self, particle: Particle) -> Particle:
        if id(particle) not in self._index:
            raise KeyError(f"Particle {particle.label!r} does not belong to this simulator")
        return particle

    def begin_drag(self, particle: Particle, pointer: Sequence[float]) -> None:
        """Put ``particle`` under pointer control, keeping its offset from the pointer."""
        p = self._owned(particle)
        px, py = float(pointer[0]), float(pointer[1])
        p.state = Dragging(offset=(p.x - px, p.y - py), pointer=(px, py))
        logger.debug(f"begin drag {p.label!r} at {p.position}")

    def drag(self, particle: Particle, pointer: Sequence[float]) -> None:
        """Move the pointer the dragged particle eases toward on the next tick."""
        p = self._owned(particle)
        if not isinstance(p.state, Dragging):
            raise RuntimeError(f"Particle {p.label!r} is not being dragged")
        p.state = replace(p.state, pointer=(float(pointer[0]), float(pointer[1])))

    def end_drag(self, particle: Particle) -> None:
        """Release ``particle``: boost its velocity once and return it to the physics."""
        p = self._owned(particle)
        if not isinstance(p.state, Dragging):
            raise RuntimeError(f"Particle {p.label!r} is not being dragged")
        p.vx *= self.config.release_boost
        p.vy *= self.config.release_boost
        p.state = FREE
        logger.debug(f"end drag {p.label!r} with velocity {p.velocity}")


def settle(
    simulator: ForceLayoutSimulator,
    *,
    max_ticks: int = 500,
    energy_threshold: float = 1e-3,
) -> int:
    """Tick until kinetic energy falls below ``energy_threshold`` or ``max_ticks`` is spent.

    Returns:
        Number of ticks executed.
    """
    for n in range(1, max_ticks + 1):
        simulator.tick()
        if simulator.kinetic_energy() < energy_threshold:
            logger.debug(f"settled after {n} ticks")
            return n
    logger.debug(f"not settled after {max_ticks} ticks (energy={simulator.kinetic_energy():.4g})")
    return max_ticks
