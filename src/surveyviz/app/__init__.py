"""NiceGUI building blocks for the survey page."""

from surveyviz.app.reveal_section import RevealSection, RevealSectionConfig

__all__ = [
    "RevealSection",
    "RevealSectionConfig",
]
