"""Synthetic survey frame for demos and tests.

Produces the same columns as the music & mental health survey with
plausible values, from a seeded numpy generator so demos are repeatable.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from surveyviz.algorithms import survey_stats as ss

GENRES = [
    "Rock", "Pop", "Metal", "Classical", "Video game music", "EDM", "R&B",
    "Hip hop", "Folk", "K pop", "Country", "Rap", "Jazz", "Lofi", "Gospel", "Latin",
]
GENRE_WEIGHTS = [19, 16, 12, 7, 6, 5, 5, 5, 4, 4, 4, 3, 3, 1, 1, 1]

SERVICES = [
    "Spotify", "YouTube Music", "Apple Music", "Pandora",
    ss.OTHER_SERVICE, ss.NO_SERVICE,
]
SERVICE_WEIGHTS = [62, 13, 7, 2, 7, 9]


def synthetic_survey(n: int = 600, seed: int = 0) -> pd.DataFrame:
    """Return ``n`` synthetic survey rows.

    Numeric answers are stored as strings, a few are left blank, like a
    frame read straight from the survey export.
    """
    rng = np.random.default_rng(seed)

    age = np.clip(rng.gamma(4.0, 6.0, n) + 12, 10, 89).round()
    hours = np.clip(rng.gamma(2.0, 1.8, n), 0, 24).round(1)
    genre_p = np.asarray(GENRE_WEIGHTS, dtype=float) / sum(GENRE_WEIGHTS)
    service_p = np.asarray(SERVICE_WEIGHTS, dtype=float) / sum(SERVICE_WEIGHTS)
    genres = rng.choice(GENRES, size=n, p=genre_p)
    bpm = rng.normal(120, 25, n).round()
    bpm[rng.random(n) < 0.1] = np.nan

    frame = pd.DataFrame({
        ss.AGE: age,
        ss.HOURS: hours,
        ss.STREAMING: rng.choice(SERVICES, size=n, p=service_p),
        ss.WHILE_WORKING: np.where(rng.random(n) < 0.78, "Yes", "No"),
        ss.FAV_GENRE: genres,
        ss.EXPLORATORY: np.where(rng.random(n) < 0.71, "Yes", "No"),
        ss.FOREIGN_LANGUAGES: np.where(rng.random(n) < 0.55, "Yes", "No"),
        ss.BPM: bpm,
        ss.MUSIC_EFFECTS: rng.choice(["Improve", "No effect", "Worsen"], size=n, p=[0.74, 0.23, 0.03]),
    })
    for factor in ss.MENTAL_FACTORS:
        frame[factor] = rng.integers(0, 11, n)

    frame = frame.astype(str).replace("nan", "")
    blank = rng.random(n) < 0.02
    frame.loc[blank, ss.STREAMING] = ""
    return frame
