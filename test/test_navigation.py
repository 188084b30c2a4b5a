#!/usr/bin/env python3
"""Unit tests for WeightMap and NavGraph."""
import math

import numpy as np
import pytest

from conftest import make_map
from frontier_exploration.exceptions import NoPathError
from frontier_exploration.navigation import NavGraph, WeightMap
from frontier_exploration.types import CellState


# ==================== WeightMap ====================

class TestWeightMapClassify:
    def test_cell_states(self):
        wm = make_map(['.#?'])
        assert wm.classify((0.5, 0.5)) is CellState.FREE
        assert wm.classify((1.5, 0.5)) is CellState.OCCUPIED
        assert wm.classify((2.5, 0.5)) is CellState.UNKNOWN

    def test_off_map_is_unknown(self):
        wm = make_map(['..'])
        assert wm.classify((-0.5, 0.5)) is CellState.UNKNOWN
        assert wm.classify((0.5, 3.0)) is CellState.UNKNOWN

    def test_occupied_threshold(self):
        wm = WeightMap(np.array([[0, 50, 64, 65, 100]]), resolution=1.0)
        states = [wm.classify_cell(gx, 0) for gx in range(5)]
        assert states == [CellState.FREE] * 3 + [CellState.OCCUPIED] * 2

    def test_state_array(self):
        wm = make_map(['.#', '?.'])
        expected = np.array([
            [CellState.FREE.value, CellState.OCCUPIED.value],
            [CellState.UNKNOWN.value, CellState.FREE.value],
        ])
        np.testing.assert_array_equal(wm.state_array(), expected)

    def test_read_only(self):
        wm = make_map(['..'])
        with pytest.raises(ValueError):
            wm.state_array()[0, 0] = CellState.OCCUPIED.value


class TestWeightMapWeights:
    def test_default_weight_grows_with_occupancy(self):
        wm = WeightMap(np.array([[0, 50]]), resolution=1.0)
        assert wm.weight((0.5, 0.5)) == 1.0
        assert wm.weight((1.5, 0.5)) == 1.5

    def test_custom_weights(self):
        wm = make_map(['..'], weights=np.array([[2.0, 3.0]]))
        assert wm.weight((1.5, 0.5)) == 3.0

    def test_no_weight_outside_free_space(self):
        wm = make_map(['.#?'])
        with pytest.raises(ValueError):
            wm.weight((1.5, 0.5))
        with pytest.raises(ValueError):
            wm.weight((2.5, 0.5))

    def test_weights_must_be_positive_on_free_cells(self):
        with pytest.raises(ValueError):
            make_map(['..'], weights=np.array([[1.0, 0.0]]))

    def test_weights_ignored_on_obstacles(self):
        wm = make_map(['.#'], weights=np.array([[1.0, 0.0]]))
        assert wm.weight((0.5, 0.5)) == 1.0

    def test_weights_shape(self):
        with pytest.raises(ValueError):
            make_map(['..'], weights=np.ones((2, 2)))


class TestWeightMapFrame:
    def test_extent(self):
        wm = make_map(['...', '...'], resolution=0.5, origin_x=-1.0, origin_y=2.0)
        assert wm.extent() == ((-1.0, 2.0), 1.5, 1.0)

    def test_transforms(self):
        wm = make_map(['....', '....'], resolution=0.5, origin_x=-1.0, origin_y=2.0)
        assert wm.grid_to_world(3, 1) == (0.75, 2.75)
        assert wm.world_to_grid(0.75, 2.75) == (3, 1)
        assert wm.world_to_grid(-1.2, 1.9) == (-1, -1)

    def test_rejects_bad_input(self):
        with pytest.raises(ValueError):
            WeightMap(np.zeros(4))
        with pytest.raises(ValueError):
            WeightMap(np.zeros((2, 2)), resolution=0.0)


# ==================== NavGraph ====================

class TestNavGraph:
    def test_straight_path(self):
        graph = NavGraph(make_map(['.....']))
        result = graph.shortest_path((0.5, 0.5), (4.5, 0.5))

        assert result.cost == pytest.approx(4.0)
        assert result.path == tuple((x + 0.5, 0.5) for x in range(5))

    def test_diagonal_step(self):
        graph = NavGraph(make_map(['..', '..']))
        result = graph.shortest_path((0.5, 0.5), (1.5, 1.5))

        assert result.cost == pytest.approx(math.sqrt(2))
        assert len(result.path) == 2

    def test_cost_uses_weights_and_resolution(self):
        weights = np.array([[1.0, 3.0, 1.0]])
        graph = NavGraph(make_map(['...'], resolution=0.5, weights=weights))
        result = graph.shortest_path((0.25, 0.25), (1.25, 0.25))

        assert result.cost == pytest.approx(0.5 * 2.0 + 0.5 * 2.0)

    def test_prefers_cheap_detour(self):
        weights = np.array([
            [1.0, 50.0, 1.0],
            [1.0, 1.0, 1.0],
        ])
        graph = NavGraph(make_map(['...', '...'], weights=weights))
        result = graph.shortest_path((0.5, 0.5), (2.5, 0.5))

        assert (1.5, 0.5) not in result.path
        assert result.cost == pytest.approx(2 * math.sqrt(2))

    def test_same_cell(self):
        graph = NavGraph(make_map(['..']))
        result = graph.shortest_path((0.2, 0.2), (0.8, 0.9))

        assert result.cost == 0.0
        assert result.path == ((0.5, 0.5),)

    def test_wall_blocks_path(self):
        graph = NavGraph(make_map(['..#..', '..#..']))
        with pytest.raises(NoPathError):
            graph.shortest_path((0.5, 0.5), (4.5, 0.5))

    def test_unknown_is_not_traversable(self):
        graph = NavGraph(make_map(['.?.']))
        with pytest.raises(NoPathError):
            graph.shortest_path((0.5, 0.5), (2.5, 0.5))

    @pytest.mark.parametrize('start,goal', [
        ((1.5, 0.5), (0.5, 0.5)),   # start in obstacle
        ((0.5, 0.5), (2.5, 0.5)),   # goal in unknown
        ((0.5, 0.5), (9.5, 0.5)),   # goal off the map
    ])
    def test_ends_must_be_free(self, start, goal):
        graph = NavGraph(make_map(['.#?']))
        with pytest.raises(NoPathError):
            graph.shortest_path(start, goal)

    def test_edges(self):
        assert NavGraph(make_map(['..'])).num_edges == 2
        assert NavGraph(make_map(['..', '..'])).num_edges == 12
        assert NavGraph(make_map(['#?'])).num_edges == 0

    def test_search_cache_bounded(self):
        graph = NavGraph(make_map(['....']), cache_size=2)
        for x in (0.5, 1.5, 2.5, 3.5):
            graph.shortest_path((x, 0.5), (0.5, 0.5))

        assert len(graph._cache) == 2
        assert graph.shortest_path((3.5, 0.5), (0.5, 0.5)).cost == pytest.approx(3.0)

    def test_get_map(self):
        wm = make_map(['..'])
        assert NavGraph(wm).get_map() is wm

    def test_logger_injected(self):
        messages = []
        NavGraph(make_map(['..']), logger=messages.append)
        assert messages == ['Navigation graph built: 2 nodes, 2 edges']
