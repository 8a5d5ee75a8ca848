"""Tests for the word-cloud force layout (physics, clamp, drag, determinism)."""

from __future__ import annotations

import logging
import math

import pytest

from surveyviz.algorithms.force_layout import (
    FREE,
    Dragging,
    ForceLayoutConfig,
    ForceLayoutSimulator,
    NonPositiveMassError,
    Particle,
    settle,
)

# Only the pairwise forces act: no centering pull, no damping.
PAIRWISE_ONLY = ForceLayoutConfig(centering=0.0, damping=1.0)

# Only damping acts.
DAMPING_ONLY = ForceLayoutConfig(repulsion=0.0, attraction=0.0, centering=0.0)


def _pair(distance: float, config: ForceLayoutConfig, mass: float = 10.0) -> ForceLayoutSimulator:
    a = Particle("a", 0.0, 0.0, mass)
    b = Particle("b", distance, 0.0, mass)
    return ForceLayoutSimulator([a, b], config)


# --- Particle ---


@pytest.mark.parametrize("mass", [0, -1.0, float("nan")])
def test_particle_rejects_non_positive_mass(mass: float) -> None:
    with pytest.raises(NonPositiveMassError):
        Particle("x", 0.0, 0.0, mass)


def test_particle_identity_semantics() -> None:
    """Two particles with equal fields are still distinct."""
    a = Particle("x", 1.0, 2.0, 3.0)
    b = Particle("x", 1.0, 2.0, 3.0)
    assert a != b
    assert len({a, b}) == 2
    assert a.state is FREE
    assert not a.is_dragging


def test_simulator_rejects_duplicate_particle() -> None:
    p = Particle("x", 0.0, 0.0, 1.0)
    with pytest.raises(ValueError):
        ForceLayoutSimulator([p, p])


# --- Minimum-distance clamp ---


def test_pair_closer_than_min_distance_contributes_nothing() -> None:
    sim = _pair(2.999, PAIRWISE_ONLY)
    sim.tick()
    a, b = sim.particles
    assert a.velocity == (0.0, 0.0)
    assert b.velocity == (0.0, 0.0)
    assert a.position == (0.0, 0.0)
    assert b.position == (2.999, 0.0)


def test_pair_beyond_min_distance_repels() -> None:
    sim = _pair(3.001, PAIRWISE_ONLY)
    sim.tick()
    a, b = sim.particles

    d = 3.001
    repulsion = (10.0 + 10.0) * 800.0 / (d * d)
    expected = -repulsion / 10.0 + d * 0.00003
    assert a.vx == pytest.approx(expected, rel=1e-12)
    assert b.vx == pytest.approx(-expected, rel=1e-12)
    assert a.vy == 0.0 and b.vy == 0.0
    assert a.vx < 0 < b.vx


def test_clamp_with_default_forces_leaves_only_centering() -> None:
    """With default config the close pair only feels centering and damping."""
    sim = _pair(2.999, ForceLayoutConfig())
    sim.tick()
    a, b = sim.particles
    # a sits on the origin: no centering direction.
    assert a.velocity == (0.0, 0.0)
    assert b.vx == pytest.approx(-0.04 * 0.99, rel=1e-12)
    assert b.vy == 0.0


def test_heavier_particle_accelerates_less() -> None:
    light = Particle("light", 0.0, 0.0, 5.0)
    heavy = Particle("heavy", 20.0, 0.0, 50.0)
    sim = ForceLayoutSimulator([light, heavy], PAIRWISE_ONLY)
    sim.tick()
    assert abs(light.vx) > abs(heavy.vx)


def test_attraction_wins_at_large_distance() -> None:
    """Far apart, the distance-growing attraction outweighs 1/d^2 repulsion."""
    sim = _pair(5000.0, PAIRWISE_ONLY, mass=1.0)
    sim.tick()
    a, b = sim.particles
    assert a.vx > 0 > b.vx


# --- Centering and damping ---


def test_centering_is_constant_magnitude() -> None:
    cfg = ForceLayoutConfig(repulsion=0.0, attraction=0.0, damping=1.0)
    near = Particle("near", 3.0, 4.0, 1.0)
    far = Particle("far", -300.0, -400.0, 1.0)
    sim = ForceLayoutSimulator([near, far], cfg)
    sim.tick()
    assert math.hypot(*near.velocity) == pytest.approx(0.04)
    assert math.hypot(*far.velocity) == pytest.approx(0.04)
    assert near.vx == pytest.approx(-0.04 * 3 / 5)
    assert far.vy == pytest.approx(0.04 * 4 / 5)


def test_centering_uses_configured_center() -> None:
    cfg = ForceLayoutConfig(repulsion=0.0, attraction=0.0, damping=1.0, center=(100.0, 0.0))
    p = Particle("p", 0.0, 0.0, 1.0)
    sim = ForceLayoutSimulator([p], cfg)
    sim.tick()
    assert p.velocity == pytest.approx((0.04, 0.0))


@pytest.mark.parametrize("n_ticks", [1, 10, 100])
def test_damping_decays_geometrically(n_ticks: int) -> None:
    a = Particle("a", 0.0, 0.0, 10.0, vx=10.0)
    b = Particle("b", 100.0, 0.0, 10.0, vx=10.0)
    sim = ForceLayoutSimulator([a, b], DAMPING_ONLY)
    sim.run(n_ticks)
    expected = 10.0 * 0.99 ** n_ticks
    for p in (a, b):
        assert math.hypot(*p.velocity) == pytest.approx(expected, rel=1e-12)
    assert sim.tick_count == n_ticks


def test_integration_is_explicit_euler() -> None:
    p = Particle("p", 1.0, 2.0, 1.0, vx=3.0, vy=-4.0)
    sim = ForceLayoutSimulator([p], DAMPING_ONLY)
    sim.tick()
    assert p.velocity == pytest.approx((2.97, -3.96))
    assert p.position == pytest.approx((3.97, -1.96))


# --- Snapshot semantics ---


def test_symmetric_pair_stays_mirrored() -> None:
    a = Particle("a", -10.0, 0.0, 30.0)
    b = Particle("b", 10.0, 0.0, 30.0)
    sim = ForceLayoutSimulator([a, b])
    sim.run(25)
    assert a.x == -b.x
    assert a.y == b.y == 0.0


def test_particle_order_does_not_change_trajectory() -> None:
    rows = [("a", -20.0, 5.0, 30.0), ("b", 15.0, -10.0, 45.0), ("c", 2.0, 30.0, 60.0)]
    forward = ForceLayoutSimulator([Particle(*s) for s in rows])
    backward = ForceLayoutSimulator([Particle(*s) for s in reversed(rows)])
    forward.run(30)
    backward.run(30)
    fwd = {label: (x, y) for label, x, y in forward.positions()}
    bwd = {label: (x, y) for label, x, y in backward.positions()}
    for label in fwd:
        assert fwd[label] == pytest.approx(bwd[label], rel=1e-9, abs=1e-9)


def test_tick_is_deterministic() -> None:
    rows = [("a", -20.0, 5.0, 30.0), ("b", 15.0, -10.0, 45.0), ("c", 2.0, 30.0, 60.0)]
    one = ForceLayoutSimulator([Particle(*s) for s in rows])
    two = ForceLayoutSimulator([Particle(*s) for s in rows])
    one.run(40)
    two.run(40)
    assert one.positions() == two.positions()


def test_empty_simulator_ticks() -> None:
    sim = ForceLayoutSimulator([])
    sim.tick()
    assert len(sim) == 0
    assert sim.kinetic_energy() == 0.0


# --- Drag ---


def test_drag_converges_without_overshoot() -> None:
    p = Particle("p", 0.0, 0.0, 10.0)
    sim = ForceLayoutSimulator([p])
    sim.begin_drag(p, (0.0, 0.0))
    target = (100.0, -40.0)

    prev = math.dist(p.position, target)
    for _ in range(50):
        sim.drag(p, target)
        sim.tick()
        d = math.dist(p.position, target)
        assert d < prev
        assert p.x <= target[0]
        assert p.y >= target[1]
        prev = d
    assert prev < 1e-5


def test_drag_keeps_grab_offset() -> None:
    p = Particle("p", 10.0, 10.0, 10.0)
    sim = ForceLayoutSimulator([p])
    sim.begin_drag(p, (12.0, 15.0))
    assert p.state == Dragging(offset=(-2.0, -5.0), pointer=(12.0, 15.0))

    sim.drag(p, (20.0, 20.0))
    sim.tick()
    # target = pointer + offset = (18, 15)
    assert p.velocity == pytest.approx(((18 - 10) * 0.3, (15 - 10) * 0.3))
    assert p.position == pytest.approx((10 + 2.4, 10 + 1.5))


def test_dragged_particle_ignores_physics() -> None:
    dragged = Particle("dragged", 0.0, 0.0, 10.0, vx=50.0, vy=50.0)
    other = Particle("other", 5.0, 0.0, 10.0)
    sim = ForceLayoutSimulator([dragged, other])
    sim.begin_drag(dragged, (0.0, 0.0))
    sim.tick()
    # Pointer never moved: velocity recomputed from scratch, particle stays put.
    assert dragged.velocity == (0.0, 0.0)
    assert dragged.position == (0.0, 0.0)


def test_dragged_particle_still_repels_others() -> None:
    dragged = Particle("dragged", 0.0, 0.0, 10.0)
    other = Particle("other", 5.0, 0.0, 10.0)
    sim = ForceLayoutSimulator([dragged, other], PAIRWISE_ONLY)
    sim.begin_drag(dragged, (0.0, 0.0))
    sim.tick()
    assert other.vx > 0


def test_end_drag_flicks_and_frees() -> None:
    p = Particle("p", 0.0, 0.0, 10.0)
    sim = ForceLayoutSimulator([p], DAMPING_ONLY)
    sim.begin_drag(p, (0.0, 0.0))
    sim.drag(p, (10.0, 0.0))
    sim.tick()
    assert p.velocity == pytest.approx((3.0, 0.0))

    sim.end_drag(p)
    assert p.state is FREE
    assert p.velocity == pytest.approx((6.0, 0.0))

    sim.tick()
    assert p.velocity == pytest.approx((6.0 * 0.99, 0.0))
    assert p.position == pytest.approx((3.0 + 6.0 * 0.99, 0.0))


def test_drag_requires_begin_drag() -> None:
    p = Particle("p", 0.0, 0.0, 10.0)
    sim = ForceLayoutSimulator([p])
    with pytest.raises(RuntimeError):
        sim.drag(p, (1.0, 1.0))
    with pytest.raises(RuntimeError):
        sim.end_drag(p)


def test_drag_foreign_particle_raises_key_error() -> None:
    sim = ForceLayoutSimulator([Particle("p", 0.0, 0.0, 10.0)])
    stranger = Particle("q", 0.0, 0.0, 10.0)
    with pytest.raises(KeyError):
        sim.begin_drag(stranger, (0.0, 0.0))


# --- Construction helpers and driver ---


def test_from_labels_is_seeded() -> None:
    labels = [("Rock", 0.0, 0.0, 60.0), ("Pop", 80.0, 10.0, 45.0)]
    one = ForceLayoutSimulator.from_labels(labels, seed=3)
    two = ForceLayoutSimulator.from_labels(labels, seed=3)
    assert [p.velocity for p in one.particles] == [p.velocity for p in two.particles]
    for p in one.particles:
        assert -1.0 <= p.vx < 1.0
        assert -1.0 <= p.vy < 1.0
    assert [p.mass for p in one.particles] == [60.0, 45.0]
    assert [p.label for p in one.particles] == ["Rock", "Pop"]


def test_from_labels_rejects_zero_size() -> None:
    with pytest.raises(NonPositiveMassError):
        ForceLayoutSimulator.from_labels([("Rock", 0.0, 0.0, 0.0)])


def test_kinetic_energy() -> None:
    sim = ForceLayoutSimulator([
        Particle("a", 0.0, 0.0, 2.0, vx=3.0, vy=4.0),
        Particle("b", 9.0, 0.0, 1.0, vx=1.0),
    ])
    assert sim.kinetic_energy() == pytest.approx(0.5 * 2 * 25 + 0.5 * 1 * 1)


def test_settle_stops_when_energy_is_low() -> None:
    cfg = ForceLayoutConfig(repulsion=0.0, attraction=0.0, centering=0.0, damping=0.5)
    sim = ForceLayoutSimulator([Particle("p", 0.0, 0.0, 1.0, vx=1.0)], cfg)
    ticks = settle(sim, max_ticks=100, energy_threshold=1e-3)
    assert ticks == 5
    assert sim.tick_count == 5


def test_settle_respects_tick_budget() -> None:
    sim = ForceLayoutSimulator([Particle("p", 0.0, 0.0, 1.0, vx=1.0)], DAMPING_ONLY)
    assert settle(sim, max_ticks=7, energy_threshold=0.0) == 7


def test_config_round_trip() -> None:
    cfg = ForceLayoutConfig(min_distance=4.0, damping=0.95, center=(1.0, -2.0))
    restored = ForceLayoutConfig.from_dict(cfg.to_dict())
    assert restored == cfg


def test_config_from_dict_defaults_and_bad_center() -> None:
    cfg = ForceLayoutConfig.from_dict({"repulsion": 400, "center": "middle"})
    assert cfg.repulsion == 400.0
    assert cfg.center == (0.0, 0.0)
    assert cfg.damping == 0.99


def test_config_from_dict_bad_value_keeps_other_keys(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        cfg = ForceLayoutConfig.from_dict({"damping": "abc", "repulsion": 400, "center": [5, 6]})
    assert cfg.damping == 0.99
    assert cfg.repulsion == 400.0
    assert cfg.center == (5.0, 6.0)
    assert "damping" in caplog.text
