"""
Tests for neighbor ranking and selection.
"""

import pytest
from knn_grader.neighbors import NeighborRanking
from knn_grader.exceptions import EmptyTrainingSetError
from knn_grader.models.data_models import Neighbor


class TestNeighborRanking:
    """Test cases for NeighborRanking class."""
    
    def test_rank_orders_by_distance(self):
        """Test all training points are ranked closest first."""
        ranking = NeighborRanking([(5, 0), (1, 0), (3, 0)], ["A", "B", "C"], p=2)
        
        ranked = ranking.rank((0, 0))
        
        assert [n.index for n in ranked] == [1, 2, 0]
        assert [n.label for n in ranked] == ["B", "C", "A"]
        assert [n.distance for n in ranked] == [1.0, 3.0, 5.0]
    
    def test_rank_is_stable_for_equal_distances(self):
        """Test equidistant points keep their training-set order."""
        ranking = NeighborRanking([(0, 2), (1, 0), (0, 1), (-1, 0)], ["A", "B", "C", "D"], p=2)
        
        ranked = ranking.rank((0, 0))
        
        assert [n.index for n in ranked] == [1, 2, 3, 0]
    
    def test_select_k_nearest(self):
        """Test selection returns the k nearest points when there is no tie at the cutoff."""
        ranking = NeighborRanking([(1, 0), (2, 0), (3, 0), (4, 0)], ["A", "A", "B", "B"], p=1)
        
        selected = ranking.select((0, 0), k=2)
        
        assert selected == [Neighbor(0, "A", 1.0), Neighbor(1, "A", 2.0)]
    
    def test_select_keeps_points_tied_at_cutoff(self):
        """Test every point at the k-th distance is selected, even beyond k."""
        ranking = NeighborRanking([(1, 0), (-1, 0), (0, 1), (5, 5)], ["A", "B", "C", "D"], p=2)
        
        selected = ranking.select((0, 0), k=1)
        
        assert len(selected) == 3
        assert {n.label for n in selected} == {"A", "B", "C"}
    
    def test_select_clamps_k_to_training_size(self):
        """Test k larger than the training set selects every point."""
        ranking = NeighborRanking([(1, 0), (2, 0), (3, 0)], ["A", "B", "C"], p=2)
        
        selected = ranking.select((0, 0), k=10)
        
        assert len(selected) == 3
    
    def test_empty_training_set_raises_error(self):
        """Test ranking an empty training set raises EmptyTrainingSetError."""
        ranking = NeighborRanking([], [], p=2)
        
        assert len(ranking) == 0
        with pytest.raises(EmptyTrainingSetError, match="training set is empty"):
            ranking.rank((0, 0))
        with pytest.raises(EmptyTrainingSetError):
            ranking.select((0, 0), k=1)
    
    def test_metric_changes_ranking(self):
        """Test the distance order decides which point is nearest."""
        points = [(-10, -2), (-9, -4), (-8, -6)]
        labels = ["A", "B", "C"]
        
        assert NeighborRanking(points, labels, p=1).rank((0, 0))[0].label == "A"
        assert NeighborRanking(points, labels, p=2).rank((0, 0))[0].label == "B"
        assert NeighborRanking(points, labels, p=3).rank((0, 0))[0].label == "C"
