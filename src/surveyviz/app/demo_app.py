# Demo app for the survey charts
"""Demo page showing every survey chart in its own reveal section.

The word cloud is animated by a ui.timer that ticks the force layout and
pushes a new figure each frame. The timer only runs while the word-cloud
section is open.

Run with:
    python -m surveyviz.app.demo_app
"""

from __future__ import annotations

from typing import Callable, Optional

import pandas as pd
from nicegui import ui

from surveyviz.algorithms import survey_stats as ss
from surveyviz.algorithms.density import EpanechnikovKernel, evaluation_grid
from surveyviz.app.reveal_section import RevealSection, RevealSectionConfig
from surveyviz.app.sample_data import synthetic_survey
from surveyviz.chart_config import ChartConfig
from surveyviz import figures
from surveyviz.utils.logging import configure_logging, get_logger
from surveyviz.word_cloud import WordCloud

logger = get_logger(__name__)

FRAME_INTERVAL_S = 1 / 30


def _safe_call(func: Callable, *args, **kwargs) -> None:
    """Call ``func``, tolerating only NiceGUI's 'client deleted' RuntimeError."""
    try:
        func(*args, **kwargs)
    except RuntimeError as e:
        if "deleted" not in str(e).lower():
            raise


def chart_figures(df: pd.DataFrame, config: ChartConfig) -> dict[str, dict]:
    """All static figures, keyed by section title."""
    kernel = EpanechnikovKernel(config.violin_bandwidth)
    grid = evaluation_grid(*config.violin_domain, count=config.violin_points)
    violins = ss.violin_densities(ss.hours_by_age_group(df), kernel, grid)
    return {
        "Age distribution": figures.age_histogram_figure(
            ss.age_histogram(df, config.histogram_bin_width), config),
        "Streaming platforms": figures.platform_bar_figure(ss.platform_counts(df), config),
        "Listening hours by age": figures.violin_figure(violins, config),
        "Music while working": figures.work_music_figure(
            ss.work_music_proportion(df, config.work_bucket_width), config),
        "Exploration": figures.pie_figure({
            "Exploratory": ss.yes_no_shares(df, ss.EXPLORATORY),
            "Foreign languages": ss.yes_no_shares(df, ss.FOREIGN_LANGUAGES),
        }, config),
        "Mental health by genre": figures.heatmap_figure(ss.mental_health_matrix(df), config),
        "Music effects": figures.bubble_figure(ss.music_effects_bubbles(df), config),
    }


class WordCloudPanel:
    """Word cloud plot driven by a frame timer."""

    def __init__(self, cloud: WordCloud) -> None:
        self.cloud = cloud
        self._plot: Optional[ui.plotly] = None
        self._timer: Optional[ui.timer] = None

    def render(self, container: ui.element) -> None:
        self._plot = ui.plotly(self.cloud.figure()).classes("w-full")
        self._timer = ui.timer(FRAME_INTERVAL_S, self.step, active=False)

    def step(self) -> None:
        self.cloud.tick()
        if self._plot is not None:
            _safe_call(self._plot.update_figure, self.cloud.figure())

    def start(self) -> None:
        if self._timer is not None:
            self._timer.activate()

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.deactivate()


def build_page(df: pd.DataFrame, config: Optional[ChartConfig] = None) -> None:
    config = config or ChartConfig()
    ui.page_title("Music & mental health survey")

    with ui.column().classes("w-full gap-4 p-4"):
        for title, fig in chart_figures(df, config).items():
            RevealSection(
                title,
                render_fn=lambda _container, fig=fig: ui.plotly(fig).classes("w-full"),
                config=RevealSectionConfig(render_once=True),
            )

        panel = WordCloudPanel(WordCloud.from_frame(df, config))
        RevealSection(
            "Favourite genres",
            render_fn=panel.render,
            on_reveal=panel.start,
            on_hide=panel.stop,
        )


def main() -> None:
    configure_logging(level="INFO")
    df = synthetic_survey(seed=0)
    logger.info(f"synthetic survey with {len(df)} rows")
    build_page(df, ChartConfig(word_cloud_seed=0))
    ui.run(reload=False, title="surveyviz demo")


if __name__ in {"__main__", "__mp_main__"}:
    main()
