"""Unit tests for ChartConfig serialization."""

import logging

import pytest

from surveyviz.algorithms.force_layout import ForceLayoutConfig
from surveyviz.chart_config import ChartConfig


def test_chart_config_defaults():
    cfg = ChartConfig()
    assert cfg.violin_bandwidth == 2.0
    assert cfg.violin_points == 50
    assert cfg.violin_domain == (0.0, 24.0)
    assert cfg.inner_width == 600 - 60 - 40
    assert cfg.inner_height == 400 - 40 - 60
    assert cfg.force_layout == ForceLayoutConfig()


def test_chart_config_round_trip():
    cfg = ChartConfig(
        width=800,
        margin={"top": 10, "right": 20, "bottom": 30, "left": 40},
        violin_bandwidth=1.5,
        word_cloud_seed=7,
        force_layout=ForceLayoutConfig(damping=0.9),
    )
    restored = ChartConfig.from_dict(cfg.to_dict())
    assert restored == cfg


def test_chart_config_from_dict_missing_keys_default():
    cfg = ChartConfig.from_dict({"width": 900})
    assert cfg.width == 900
    assert cfg.height == ChartConfig().height
    assert cfg.word_cloud_seed is None


def test_chart_config_partial_margin_keeps_other_sides():
    cfg = ChartConfig.from_dict({"margin": {"top": 5}})
    assert cfg.margin == {"top": 5, "right": 40, "bottom": 60, "left": 60}


def test_chart_config_from_dict_warns_on_unknown_key(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING):
        cfg = ChartConfig.from_dict({"roi_id": 3, "height": 300})
    assert cfg.height == 300
    assert "roi_id" in caplog.text


def test_chart_config_from_dict_invalid_values_fall_back(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING):
        cfg = ChartConfig.from_dict({
            "width": "wide",
            "violin_domain": [1],
            "force_layout": "strong",
        })
    defaults = ChartConfig()
    assert cfg.width == defaults.width
    assert cfg.violin_domain == defaults.violin_domain
    assert cfg.force_layout == defaults.force_layout
    assert "width" in caplog.text


def test_chart_config_nested_force_layout_keeps_valid_keys(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING):
        cfg = ChartConfig.from_dict({"force_layout": {"damping": "abc", "centering": 0.1}})
    assert cfg.force_layout.damping == ForceLayoutConfig().damping
    assert cfg.force_layout.centering == 0.1
    assert "damping" in caplog.text
