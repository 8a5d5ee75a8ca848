"""Reveal section: build a chart the first time its section is opened.

RevealSection wraps a ui.expansion. Opening it calls ``render_fn`` (once by
default) and ``on_reveal``; closing it calls ``on_hide``. Animated charts
use the two callbacks to start and stop their frame timer so nothing ticks
while the chart is out of view.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from nicegui import ui

from surveyviz.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RevealSectionConfig:
    """Configuration for RevealSection.

    Args:
        render_once: Build the content only the first time the section opens.
        clear_on_close: Clear the content when the section closes. With
            render_once=False the content is rebuilt on the next open.
        show_spinner: Show a spinner while the content is being built.
        initially_open: Open (and build) the section immediately.
    """
    render_once: bool = True
    clear_on_close: bool = False
    show_spinner: bool = True
    initially_open: bool = False


class RevealSection:
    """Expansion whose content is built on demand.

    Inputs:
        title: Expansion title.
        render_fn: Builds widgets into the provided container.
        config: Render-once vs rebuild and clear-on-close behaviour.
        subtitle: Optional helper text shown above the content.
        on_reveal: Called every time the section opens, after rendering.
        on_hide: Called every time the section closes.
    """

    def __init__(
        self,
        title: str,
        *,
        render_fn: Callable[[ui.element], None],
        config: RevealSectionConfig | None = None,
        subtitle: Optional[str] = None,
        on_reveal: Optional[Callable[[], None]] = None,
        on_hide: Optional[Callable[[], None]] = None,
    ) -> None:
        self._title = title
        self._render_fn = render_fn
        self._cfg = config or RevealSectionConfig()
        self._on_reveal = on_reveal
        self._on_hide = on_hide

        self._rendered = False
        self._rendering = False
        self.visible = False

        with ui.expansion(title, value=False).classes("w-full") as exp:
            self._expansion = exp

            with ui.column().classes("w-full gap-2"):
                if subtitle:
                    ui.label(subtitle).classes("text-sm text-gray-500")

                self._placeholder = ui.label("Open to load…").classes("text-sm text-gray-500")
                self._spinner = ui.spinner(size="md")
                self._spinner.visible = False

                self._content = ui.column().classes("w-full")

        # e.args is the new open state (bool)
        self._expansion.on("update:model-value", self._on_model_value)

        if self._cfg.initially_open:
            self.open()

    @property
    def rendered(self) -> bool:
        return self._rendered

    def _on_model_value(self, e) -> None:
        if bool(getattr(e, "args", False)):
            self.open()
        else:
            self.close()

    def open(self) -> None:
        """Expand, render if needed, then notify ``on_reveal``."""
        if self._rendering:
            return
        self._expansion.open()
        self.visible = True
        if not (self._cfg.render_once and self._rendered):
            self._render()
        if self._on_reveal is not None:
            self._on_reveal()

    def _render(self) -> None:
        self._rendering = True
        self._placeholder.text = "Loading…"
        if self._cfg.show_spinner:
            self._spinner.visible = True
        self._content.clear()
        try:
            with self._content:
                self._render_fn(self._content)
            self._rendered = True
            self._placeholder.visible = False
            logger.debug(f"rendered section {self._title!r}")
        finally:
            self._rendering = False
            self._spinner.visible = False

    def close(self) -> None:
        """Collapse the expansion, notify ``on_hide`` and optionally clear the content."""
        self._expansion.close()
        self.visible = False
        if self._on_hide is not None:
            self._on_hide()
        if not self._cfg.clear_on_close or not self._rendered:
            return

        self._content.clear()
        self._placeholder.visible = True
        self._placeholder.text = "Open to load…"
        if not self._cfg.render_once:
            self._rendered = False
