"""Utilities for matching exercise names against the catalog."""

import re
from difflib import SequenceMatcher

from ..models.workout import CatalogExercise

# Abbreviations commonly found in hand-written plans
ABBREVIATIONS = {
    "bb": "barbell",
    "db": "dumbbell",
    "kb": "kettlebell",
    "sl": "single leg",
    "rdl": "romanian deadlift",
    "bss": "bulgarian split squat",
    "rfess": "rear foot elevated split squat",
    "ham": "hamstring",
    "hams": "hamstring",
    "quad": "quadriceps",
    "quads": "quadriceps",
}


def normalize_exercise_name(name: str) -> str:
    """Normalize an exercise name for comparison.

    Converts to lowercase, removes punctuation and extra whitespace,
    and expands common abbreviations.
    """
    normalized = name.lower().strip()
    normalized = re.sub(r"[-_/]", " ", normalized)
    normalized = re.sub(r"[^\w\s]", "", normalized)
    normalized = re.sub(r"\s+", " ", normalized).strip()

    if normalized in ABBREVIATIONS:
        return ABBREVIATIONS[normalized]

    for abbrev, full in ABBREVIATIONS.items():
        normalized = re.sub(rf"\b{abbrev}\b", full, normalized)

    return normalized


def find_matching_exercise(
    name: str,
    exercises: list[CatalogExercise],
    threshold: float = 0.8,
) -> CatalogExercise | None:
    """Find the best matching catalog exercise.

    Args:
        name: The exercise name to match
        exercises: Catalog exercises to search
        threshold: Minimum similarity ratio (0-1) to consider a match

    Returns:
        The best matching CatalogExercise or None if no match above threshold
    """
    normalized_name = normalize_exercise_name(name)

    best_match: CatalogExercise | None = None
    best_score = 0.0

    for exercise in exercises:
        candidate = normalize_exercise_name(exercise.name)
        if candidate == normalized_name:
            return exercise

        score = SequenceMatcher(None, normalized_name, candidate).ratio()
        if score > best_score:
            best_score = score
            best_match = exercise

    if best_score >= threshold:
        return best_match

    return None
