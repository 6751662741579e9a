"""Tests for allele overlap counting."""

import pytest

from genotype_stats.overlap import allele_index_overlap, allele_overlap


class TestAlleleOverlap:
    """Tests for allele_overlap function."""

    def test_duplicates_consumed_once(self) -> None:
        """Each match consumes exactly one occurrence."""
        assert allele_overlap(["A", "A", "B"], ["A", "B", "B"]) == 2

    def test_no_match(self) -> None:
        assert allele_overlap(["X"], ["Y"]) == 0

    def test_empty_first_returns_baseline(self) -> None:
        assert allele_overlap([], ["A", "G"]) == 0
        assert allele_overlap([], ["A", "G"], start=5) == 5

    def test_empty_second_returns_baseline(self) -> None:
        assert allele_overlap(["A", "G"], [], start=2) == 2

    def test_baseline_added(self) -> None:
        assert allele_overlap(["A", "G"], ["G", "A"], start=1) == 3

    def test_order_of_second_irrelevant(self) -> None:
        """Any ordering of the second collection gives the same count."""
        first = ["A", "G", "G", "T"]
        for second in (["G", "A", "G"], ["G", "G", "A"], ["A", "G", "G"]):
            assert allele_overlap(first, second) == 3

    def test_more_duplicates_in_first(self) -> None:
        assert allele_overlap(["G", "G", "G"], ["G", "A"]) == 1

    def test_no_call_alleles_match_each_other(self) -> None:
        assert allele_overlap([None, "A"], [None, "G"]) == 1

    @pytest.mark.parametrize(
        "g1,g2,expected",
        [
            (["A", "A"], ["A", "A"], 2),
            (["A", "G"], ["G", "G"], 1),
            (["A", "G"], ["C", "T"], 0),
            (["AT", "A"], ["A", "AT"], 2),
        ],
    )
    def test_genotype_pairs(self, g1: list[str], g2: list[str], expected: int) -> None:
        """Test typical diploid genotype comparisons."""
        assert allele_overlap(g1, g2) == expected


class TestAlleleIndexOverlap:
    """Tests for allele_index_overlap function."""

    def test_duplicates_consumed_once(self) -> None:
        assert allele_index_overlap([0, 0, 1], [0, 1, 1]) == 2

    def test_no_match(self) -> None:
        assert allele_index_overlap([2], [1]) == 0

    def test_empty_inputs(self) -> None:
        assert allele_index_overlap([], [0, 1], start=4) == 4
        assert allele_index_overlap([0, 1], [], start=4) == 4

    def test_same_as_allele_overlap(self) -> None:
        """Both variants share identical semantics."""
        assert allele_index_overlap([1, 1, 2], [2, 1, 0]) == allele_overlap(
            ["G", "G", "C"], ["C", "G", "A"]
        )

    def test_rejects_non_integers(self) -> None:
        with pytest.raises(TypeError, match="must be an int"):
            allele_index_overlap([0, "1"], [0])  # type: ignore[list-item]
