"""Tests for exercise name matching."""

import pytest

from balance_lift.data.exercise_loader import load_catalog_exercises
from balance_lift.utils.exercise_utils import find_matching_exercise, normalize_exercise_name


@pytest.fixture(scope="module")
def catalog():
    return load_catalog_exercises()


class TestNormalizeExerciseName:
    """Tests for normalize_exercise_name function."""

    def test_lowercase_and_strip(self):
        """Test basic normalization."""
        assert normalize_exercise_name("  Hip Thrust  ") == "hip thrust"

    def test_abbreviation_expansion(self):
        """Test abbreviation expansion."""
        assert normalize_exercise_name("RDL") == "romanian deadlift"
        assert normalize_exercise_name("KB") == "kettlebell"

    def test_inline_abbreviation(self):
        """Test abbreviation expansion within name."""
        assert normalize_exercise_name("SL Glute Bridge") == "single leg glute bridge"
        assert normalize_exercise_name("DB RDL") == "dumbbell romanian deadlift"

    def test_separators_and_punctuation(self):
        """Test dashes become spaces and punctuation is dropped."""
        assert normalize_exercise_name("Single-Leg Glute Bridge") == "single leg glute bridge"
        assert normalize_exercise_name("Nordic (Hamstring) Curl!") == "nordic hamstring curl"

    def test_extra_whitespace(self):
        """Test extra whitespace removal."""
        assert normalize_exercise_name("Goblet    Squat") == "goblet squat"


class TestFindMatchingExercise:
    """Tests for find_matching_exercise function."""

    def test_exact_match(self, catalog):
        """Test exact name matching."""
        result = find_matching_exercise("Goblet Squat", catalog)
        assert result is not None
        assert result.id == "goblet-squat"

    def test_case_insensitive(self, catalog):
        """Test case insensitive matching."""
        result = find_matching_exercise("hip thrust", catalog)
        assert result is not None
        assert result.id == "hip-thrust"

    def test_abbreviation_match(self, catalog):
        """Test abbreviation matching."""
        result = find_matching_exercise("RDL", catalog)
        assert result is not None
        assert result.id == "romanian-deadlift"

    def test_fuzzy_match(self, catalog):
        """Test fuzzy matching with a typo."""
        result = find_matching_exercise("Nordic Hamstring Curls", catalog)
        assert result is not None
        assert result.id == "nordic-hamstring-curl"

    def test_no_match(self, catalog):
        """Test unrelated names do not match."""
        assert find_matching_exercise("Bench Press", catalog) is None

    def test_threshold(self, catalog):
        """Test a stricter threshold rejects near misses."""
        assert find_matching_exercise("Goblet Squats", catalog, threshold=0.99) is None
        assert find_matching_exercise("Goblet Squats", catalog, threshold=0.8) is not None

    def test_empty_catalog(self):
        assert find_matching_exercise("Goblet Squat", []) is None
