import pytest

from resume_matcher.services.similarity import fuzzy_match, keyword_similarity, levenshtein_distance


class TestLevenshtein:
    """Edit distance"""

    @pytest.mark.parametrize("a,b,expected", [
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("", "abc", 3),
        ("abc", "", 3),
        ("same", "same", 0),
    ])
    def test_known_distances(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_symmetric(self):
        assert levenshtein_distance("postgresql", "postgres") == levenshtein_distance("postgres", "postgresql")

    def test_long_phrases(self):
        # free-text skill phrases can run to a whole line
        a = "distributed systems " * 40
        b = "distributed  system " * 40
        assert levenshtein_distance("a" * 800, "b" * 800) == 800
        assert levenshtein_distance(a, b) <= 80
        assert fuzzy_match(a, b)


class TestFuzzyMatch:
    """Substring or edit-distance based skill equality"""

    @pytest.mark.parametrize("s", ["python", "node.js", "a", "machine learning"])
    def test_reflexive(self, s):
        assert fuzzy_match(s, s)

    def test_substring_either_way(self):
        assert fuzzy_match("react", "react native")
        assert fuzzy_match("react native", "react")

    def test_small_spelling_variance(self):
        # 7/8 similarity
        assert fuzzy_match("reactjs", "react.js")

    def test_unrelated_skills(self):
        assert not fuzzy_match("python", "java")
        assert not fuzzy_match("mongodb", "react")

    def test_threshold_is_respected(self):
        # "kubernete" vs "kubernetes" is a substring; use a substitution instead
        assert fuzzy_match("kubernetes", "kubernetos", threshold=0.9)
        assert not fuzzy_match("kubernetes", "kubernetos", threshold=0.95)

    def test_empty_strings(self):
        assert fuzzy_match("", "")


class TestKeywordSimilarity:
    """Jaccard overlap scaled to 0-100"""

    def test_identical_sets(self):
        assert keyword_similarity(["python", "django"], ["django", "python"]) == 100

    def test_empty_side_is_zero(self):
        assert keyword_similarity(["python"], []) == 0
        assert keyword_similarity([], ["python"]) == 0
        assert keyword_similarity([], []) == 0

    def test_partial_overlap(self):
        assert keyword_similarity(["a1", "b1"], ["b1", "c1"]) == pytest.approx(100 / 3)

    def test_duplicates_do_not_count_twice(self):
        assert keyword_similarity(["api", "api", "rest"], ["api"]) == 50
