"""
Survey aggregations: pure pandas/numpy, one function per chart.

Every function takes the raw survey frame (string or numeric columns, as
loaded by the caller), coerces numerics with ``pd.to_numeric(errors="coerce")``
and drops what cannot be parsed. Empty inputs return empty frames with the
documented columns so figure builders never special-case them.

Category order follows first appearance in the data unless stated otherwise,
so charts keep the order respondents produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence

import numpy as np
import pandas as pd

from surveyviz.algorithms.density import DensityEstimator, DensityPoint, Kernel
from surveyviz.utils.logging import get_logger

logger = get_logger(__name__)

# Survey column names.
AGE = "Age"
HOURS = "Hours per day"
STREAMING = "Primary streaming service"
WHILE_WORKING = "While working"
FAV_GENRE = "Fav genre"
EXPLORATORY = "Exploratory"
FOREIGN_LANGUAGES = "Foreign languages"
BPM = "BPM"
MUSIC_EFFECTS = "Music effects"
MENTAL_FACTORS = ["Anxiety", "Depression", "Insomnia", "OCD"]

OTHER_SERVICE = "Other streaming service"
NO_SERVICE = "I do not use a streaming service."

HOURS_DOMAIN = (0.0, 24.0)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def _numeric(df: pd.DataFrame, col: str) -> pd.Series:
    """Column as float series (unparsable -> NaN); all-NaN if the column is missing."""
    if col not in df.columns:
        return pd.Series(np.nan, index=df.index, dtype=float)
    return pd.to_numeric(df[col], errors="coerce").astype(float)


def _text(df: pd.DataFrame, col: str) -> pd.Series:
    """Column as stripped strings with blanks and missing values dropped."""
    if col not in df.columns:
        return pd.Series([], dtype=object)
    s = df[col].dropna().astype(str).str.strip()
    return s[s != ""]


# -----------------------------------------------------------------------------
# Histogram: age distribution
# -----------------------------------------------------------------------------


def age_histogram(df: pd.DataFrame, bin_width: int = 1) -> pd.DataFrame:
    """
    Count respondents per age bin.

    Bins start at ``floor(min age)`` and are ``bin_width`` wide; the last bin
    always contains the oldest respondent.

    Returns:
        DataFrame with columns x0, x1, count (one row per bin).
    """
    if bin_width <= 0:
        raise ValueError(f"bin_width must be > 0, got {bin_width}")
    ages = _numeric(df, AGE).dropna()
    if len(ages) == 0:
        return pd.DataFrame(columns=["x0", "x1", "count"])

    lo = float(np.floor(ages.min()))
    n_bins = int(np.floor((float(ages.max()) - lo) / bin_width)) + 1
    edges = lo + bin_width * np.arange(n_bins + 1)
    counts, _ = np.histogram(ages.values, bins=edges)
    return pd.DataFrame({
        "x0": edges[:-1],
        "x1": edges[1:],
        "count": counts,
    })


# -----------------------------------------------------------------------------
# Bar chart: streaming platforms
# -----------------------------------------------------------------------------


def platform_counts(df: pd.DataFrame) -> pd.DataFrame:
    """
    Respondents per primary streaming service.

    Sorted by count (descending, ties by name), except that
    "Other streaming service" and then "I do not use a streaming service."
    always come last.

    Returns:
        DataFrame with columns platform, count.
    """
    platforms = _text(df, STREAMING)
    if len(platforms) == 0:
        return pd.DataFrame(columns=["platform", "count"])

    counts = platforms.value_counts()
    rank = {OTHER_SERVICE: 1, NO_SERVICE: 2}
    rows = sorted(
        ((str(name), int(n)) for name, n in counts.items()),
        key=lambda row: (rank.get(row[0], 0), -row[1], row[0]),
    )
    return pd.DataFrame(rows, columns=["platform", "count"])


# -----------------------------------------------------------------------------
# Violin: listening hours per age group
# -----------------------------------------------------------------------------


def hours_by_age_group(df: pd.DataFrame) -> Dict[str, List[float]]:
    """
    Hours-per-day samples for the age groups "0-19", "20-29" and "30+".

    Hours outside ``[0, 24]`` and rows without a parsable age are dropped.
    Every group key is present, possibly with an empty list.
    """
    age = _numeric(df, AGE)
    hours = _numeric(df, HOURS)
    valid = hours.notna() & (hours >= HOURS_DOMAIN[0]) & (hours <= HOURS_DOMAIN[1])

    masks = {
        "0-19": age < 20,
        "20-29": (age >= 20) & (age < 30),
        "30+": age >= 30,
    }
    return {name: hours[mask & valid].tolist() for name, mask in masks.items()}


@dataclass
class ViolinGroup:
    """Density curve and summary of one violin."""
    name: str
    count: int
    mean: float
    median: float
    curve: List[DensityPoint] = field(default_factory=list)

    @property
    def max_density(self) -> float:
        return max((p.density for p in self.curve), default=0.0)


def violin_densities(
    groups: Mapping[str, Sequence[float]],
    kernel: Kernel,
    evaluation_points: Sequence[float],
) -> List[ViolinGroup]:
    """
    Estimate one density curve per group, in the order of ``groups``.

    Groups without samples have no defined density; they are skipped with a
    warning instead of being drawn.
    """
    estimator = DensityEstimator(kernel, evaluation_points)
    result: List[ViolinGroup] = []
    for name, samples in groups.items():
        values = np.asarray(list(samples), dtype=float)
        if len(values) == 0:
            logger.warning(f"violin group {name!r} has no samples, skipping")
            continue
        result.append(ViolinGroup(
            name=str(name),
            count=len(values),
            mean=float(np.mean(values)),
            median=float(np.median(values)),
            curve=estimator.estimate(values.tolist()),
        ))
    return result


# -----------------------------------------------------------------------------
# Bar chart: music while working, per age bucket
# -----------------------------------------------------------------------------


def work_music_proportion(df: pd.DataFrame, bucket_width: int = 15) -> pd.DataFrame:
    """
    Share of respondents listening to music while working, per age bucket.

    Buckets are ``[a, a + bucket_width)`` labelled ``"a-(a+bucket_width-1)"``
    and ordered by age.

    Returns:
        DataFrame with columns ageGroup, proportion (percent), total.
    """
    if bucket_width <= 0:
        raise ValueError(f"bucket_width must be > 0, got {bucket_width}")
    cols = ["ageGroup", "proportion", "total"]
    if WHILE_WORKING not in df.columns:
        return pd.DataFrame(columns=cols)

    age = _numeric(df, AGE)
    answer = df[WHILE_WORKING].astype(str).str.strip()
    keep = age.notna() & df[WHILE_WORKING].notna() & (answer != "")
    if not keep.any():
        return pd.DataFrame(columns=cols)

    tmp = pd.DataFrame({
        "bucket": (np.floor(age[keep] / bucket_width) * bucket_width).astype(int),
        "yes": answer[keep] == "Yes",
    })
    grp = tmp.groupby("bucket", sort=True)["yes"]
    total = grp.size()
    yes = grp.sum()
    return pd.DataFrame({
        "ageGroup": [f"{b}-{b + bucket_width - 1}" for b in total.index],
        "proportion": (yes / total * 100.0).values,
        "total": total.values,
    })


# -----------------------------------------------------------------------------
# Word cloud: favourite genres
# -----------------------------------------------------------------------------


def genre_word_sizes(df: pd.DataFrame, min_size: float = 30, scale: float = 5) -> pd.DataFrame:
    """
    One word per favourite genre, sized by its share of responses.

    ``size = max(min_size, percentage * scale)``.

    Returns:
        DataFrame with columns text, count, percentage, size.
    """
    genres = _text(df, FAV_GENRE)
    if len(genres) == 0:
        return pd.DataFrame(columns=["text", "count", "percentage", "size"])

    counts = genres.groupby(genres, sort=False).size()
    percentage = counts / len(genres) * 100.0
    return pd.DataFrame({
        "text": [str(k) for k in counts.index],
        "count": counts.values,
        "percentage": percentage.values,
        "size": np.maximum(min_size, percentage.values * scale),
    })


# -----------------------------------------------------------------------------
# Pie charts: yes/no questions
# -----------------------------------------------------------------------------


def yes_no_shares(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """
    Counts and percentages of "Yes"/"No" answers to ``column``.

    Any other answer is ignored.

    Returns:
        DataFrame with columns answer, count, percentage.
    """
    answers = _text(df, column)
    answers = answers[answers.isin(["Yes", "No"])]
    if len(answers) == 0:
        return pd.DataFrame(columns=["answer", "count", "percentage"])

    counts = answers.groupby(answers, sort=False).size()
    return pd.DataFrame({
        "answer": [str(k) for k in counts.index],
        "count": counts.values,
        "percentage": (counts / counts.sum() * 100.0).values,
    })


# -----------------------------------------------------------------------------
# Heatmap: mental health factors per genre
# -----------------------------------------------------------------------------


def mental_health_matrix(df: pd.DataFrame) -> pd.DataFrame:
    """
    Mean self-reported score of each mental factor per favourite genre.

    Genres with no parsable score for a factor get 0.

    Returns:
        DataFrame indexed by genre with one column per factor in MENTAL_FACTORS.
    """
    genres = _text(df, FAV_GENRE)
    if len(genres) == 0:
        return pd.DataFrame(columns=MENTAL_FACTORS, dtype=float)

    scores = pd.DataFrame({f: _numeric(df, f) for f in MENTAL_FACTORS}).loc[genres.index]
    scores["genre"] = genres
    matrix = scores.groupby("genre", sort=False)[MENTAL_FACTORS].mean().fillna(0.0)
    matrix.index.name = "genre"
    return matrix


# -----------------------------------------------------------------------------
# Bubble scatter: tempo vs reported improvement
# -----------------------------------------------------------------------------


def music_effects_bubbles(df: pd.DataFrame) -> pd.DataFrame:
    """
    Per genre: average BPM and percentage of listeners reporting "Improve".

    Only rows with a valid BPM (> 0) count, for the average and for the
    percentage alike; genres without any valid BPM are left out.

    Returns:
        DataFrame with columns genre, bpm, improvement (percent), total.
    """
    cols = ["genre", "bpm", "improvement", "total"]
    genres = _text(df, FAV_GENRE)
    bpm = _numeric(df, BPM).loc[genres.index]
    valid = bpm.notna() & (bpm > 0)
    if not valid.any():
        return pd.DataFrame(columns=cols)

    if MUSIC_EFFECTS in df.columns:
        improved = df.loc[genres.index, MUSIC_EFFECTS].astype(str).str.strip() == "Improve"
    else:
        improved = pd.Series(False, index=genres.index)

    tmp = pd.DataFrame({
        "genre": genres[valid],
        "bpm": bpm[valid],
        "improved": improved[valid],
    })
    grp = tmp.groupby("genre", sort=False)
    total = grp.size()
    return pd.DataFrame({
        "genre": [str(k) for k in total.index],
        "bpm": grp["bpm"].mean().values,
        "improvement": (grp["improved"].sum() / total * 100.0).values,
        "total": total.values,
    })
