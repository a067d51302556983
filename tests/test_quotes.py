"""
Tests for quote selection.
"""
import pytest
from tipview.quotes import QUOTES, Quote, pick_random


class TestPickRandom:
    """Tests for pick_random."""

    def test_same_seed_same_quote(self):
        assert pick_random(seed=42) == pick_random(seed=42)

    def test_picks_from_list(self):
        for seed in range(20):
            assert pick_random(seed=seed) in QUOTES

    def test_custom_list(self):
        only = Quote("Keep the change.", "Anonymous")

        assert pick_random([only]) == only

    def test_empty_list(self):
        with pytest.raises(ValueError):
            pick_random([])
