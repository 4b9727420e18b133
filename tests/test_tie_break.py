"""
Tests for tie-break resolution.
"""

import logging
import pytest
from knn_grader.tie_break import TieBreakResolver
from knn_grader.models.data_models import LabelStats, TieBreakReason, TieBreakStrategy


def stats_of(*entries):
    """Build a label -> LabelStats mapping from (label, count, sum, mean, nearest) tuples."""
    return {entry[0]: LabelStats(*entry) for entry in entries}


class TestTieBreakResolver:
    """Test cases for TieBreakResolver class."""
    
    def test_unique_majority_wins(self):
        """Test a strictly greater vote count wins without tie-break."""
        stats = stats_of(("A", 2, 10.0, 5.0, 4.0), ("B", 1, 0.5, 0.5, 0.5))
        
        assert TieBreakResolver().resolve(stats) == ("A", TieBreakReason.MAJORITY)
    
    def test_single_label_is_majority(self):
        """Test a single candidate label wins by majority."""
        stats = stats_of(("B", 1, 2.0, 2.0, 2.0))
        
        assert TieBreakResolver("nearest").resolve(stats) == ("B", TieBreakReason.MAJORITY)
    
    def test_sum_strategy(self):
        """Test the sum strategy keeps the smallest total distance."""
        stats = stats_of(("A", 2, 5.0, 2.5, 1.0), ("B", 2, 3.0, 1.5, 1.0))
        
        assert TieBreakResolver("sum").resolve(stats) == ("B", TieBreakReason.SUM_DISTANCE)
    
    def test_mean_strategy(self):
        """Test the mean strategy keeps the smallest mean distance."""
        stats = stats_of(("A", 2, 3.0, 1.5, 1.0), ("B", 2, 5.0, 2.5, 1.0))
        
        assert TieBreakResolver(TieBreakStrategy.MEAN).resolve(stats) == ("A", TieBreakReason.MEAN_DISTANCE)
    
    def test_nearest_strategy(self):
        """Test the nearest strategy keeps the smallest single distance."""
        stats = stats_of(("A", 2, 4.0, 2.0, 1.0), ("B", 2, 5.0, 2.5, 2.0))
        
        assert TieBreakResolver("nearest").resolve(stats) == ("A", TieBreakReason.NEAREST_NEIGHBOR)
    
    def test_alphabetical_fallback(self):
        """Test an exact tie on the statistic falls back to the smallest label."""
        stats = stats_of(("B", 1, 1.0, 1.0, 1.0), ("A", 1, 1.0, 1.0, 1.0))
        
        for strategy in TieBreakStrategy:
            assert TieBreakResolver(strategy).resolve(stats) == ("A", TieBreakReason.ALPHABETICAL)
    
    def test_strategy_only_applies_to_tied_labels(self):
        """Test labels outside the vote tie are never considered by the strategy."""
        stats = stats_of(
            ("C", 1, 0.1, 0.1, 0.1),
            ("A", 2, 4.0, 2.0, 1.0),
            ("B", 2, 3.0, 1.5, 1.0),
        )
        
        assert TieBreakResolver("sum").resolve(stats) == ("B", TieBreakReason.SUM_DISTANCE)
    
    def test_alphabetical_among_remaining_ties_only(self):
        """Test the alphabetical rule only picks among labels the strategy kept."""
        stats = stats_of(
            ("A", 1, 2.0, 2.0, 2.0),
            ("C", 1, 1.0, 1.0, 1.0),
            ("B", 1, 1.0, 1.0, 1.0),
        )
        
        assert TieBreakResolver("sum").resolve(stats) == ("B", TieBreakReason.ALPHABETICAL)
    
    def test_unknown_strategy_behaves_as_sum(self, caplog):
        """Test an unrecognized strategy falls back to the sum strategy."""
        stats = stats_of(("A", 2, 5.0, 2.5, 1.0), ("B", 2, 3.0, 1.5, 2.0))
        
        with caplog.at_level(logging.WARNING):
            resolver = TieBreakResolver("furthest")
        
        assert resolver.strategy == TieBreakStrategy.SUM
        assert resolver.resolve(stats) == ("B", TieBreakReason.SUM_DISTANCE)
        assert "furthest" in caplog.text
    
    def test_absent_strategy_behaves_as_sum(self):
        """Test a missing strategy falls back to the sum strategy."""
        assert TieBreakResolver(None).strategy == TieBreakStrategy.SUM
        assert TieBreakResolver("  ").strategy == TieBreakStrategy.SUM
    
    def test_resolution_is_order_independent(self):
        """Test the insertion order of the statistics does not change the outcome."""
        entries = [("A", 2, 3.0, 1.5, 1.0), ("B", 2, 3.0, 1.5, 1.0), ("C", 1, 0.5, 0.5, 0.5)]
        
        forward = TieBreakResolver("mean").resolve(stats_of(*entries))
        backward = TieBreakResolver("mean").resolve(stats_of(*reversed(entries)))
        
        assert forward == backward == ("A", TieBreakReason.ALPHABETICAL)
    
    def test_empty_stats_raises_error(self):
        """Test resolving without candidates raises ValueError."""
        with pytest.raises(ValueError, match="Label statistics cannot be empty"):
            TieBreakResolver().resolve({})
