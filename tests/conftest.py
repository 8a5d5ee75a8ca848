# tests/conftest.py
"""Shared fixtures for surveyviz tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest


def pytest_configure() -> None:
    # Ensure `src/` is importable when running tests from the repo root.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def survey_df() -> pd.DataFrame:
    """Ten hand-written survey rows, numbers as strings like a raw export."""
    return pd.DataFrame({
        "Age": ["18", "19", "22", "25", "27", "31", "45", "", "16", "abc"],
        "Hours per day": ["3", "4", "2", "30", "1.5", "0", "6", "2", "5", "1"],
        "Primary streaming service": [
            "Spotify", "Spotify", "Apple Music", "I do not use a streaming service.",
            "Other streaming service", "Spotify", "YouTube Music", "", "Apple Music", "Spotify",
        ],
        "While working": ["Yes", "No", "Yes", "Yes", "", "No", "Yes", "Yes", "Yes", "No"],
        "Fav genre": ["Rock", "Pop", "Rock", "Metal", "Rock", "Pop", "Jazz", "Rock", "", "Pop"],
        "Exploratory": ["Yes", "Yes", "No", "Yes", "No", "Yes", "", "Yes", "Maybe", "No"],
        "Foreign languages": ["No", "No", "Yes", "No", "No", "Yes", "Yes", "No", "No", ""],
        "Anxiety": ["7", "3", "5", "8", "6", "2", "1", "4", "9", "5"],
        "Depression": ["6", "2", "4", "9", "5", "1", "0", "3", "8", "4"],
        "Insomnia": ["1", "0", "2", "3", "4", "5", "6", "7", "8", "9"],
        "OCD": ["0", "0", "0", "1", "1", "1", "2", "2", "2", "3"],
        "BPM": ["120", "100", "140", "", "0", "110", "90", "130", "150", "abc"],
        "Music effects": [
            "Improve", "No effect", "Improve", "Improve", "Improve",
            "Improve", "No effect", "Worsen", "Improve", "Improve",
        ],
    })
