"""
Tests for vote aggregation.
"""

import pytest
from knn_grader.voting import VoteAggregator
from knn_grader.models.data_models import Neighbor, LabelStats


class TestVoteAggregator:
    """Test cases for VoteAggregator class."""
    
    def setup_method(self):
        """Set up test fixtures."""
        self.aggregator = VoteAggregator(["A", "A", "B", "C"])
    
    def test_label_names_in_training_order(self):
        """Test labels are indexed once, in order of first appearance."""
        assert self.aggregator.label_names == ["A", "B", "C"]
    
    def test_aggregate_statistics(self):
        """Test count, sum, mean and nearest distance per label."""
        neighbors = [
            Neighbor(0, "A", 1.0),
            Neighbor(2, "B", 1.5),
            Neighbor(1, "A", 2.0),
        ]
        
        stats = self.aggregator.aggregate(neighbors)
        
        assert stats["A"] == LabelStats("A", 2, 3.0, 1.5, 1.0)
        assert stats["B"] == LabelStats("B", 1, 1.5, 1.5, 1.5)
        assert "C" not in stats
    
    def test_mean_equals_sum_divided_by_count(self):
        """Test the mean is exactly sum / count."""
        neighbors = [
            Neighbor(0, "A", 0.1),
            Neighbor(1, "A", 0.2),
        ]
        
        stats = self.aggregator.aggregate(neighbors)
        
        assert stats["A"].mean_distance == stats["A"].sum_distance / stats["A"].count
    
    def test_labels_ordered_by_first_appearance(self):
        """Test the result follows the order in which labels appear among the neighbors."""
        neighbors = [
            Neighbor(3, "C", 0.5),
            Neighbor(0, "A", 1.0),
            Neighbor(2, "B", 1.0),
        ]
        
        stats = self.aggregator.aggregate(neighbors)
        
        assert list(stats) == ["C", "A", "B"]
    
    def test_aggregate_empty_neighbors(self):
        """Test aggregating no neighbors yields no statistics."""
        assert self.aggregator.aggregate([]) == {}
