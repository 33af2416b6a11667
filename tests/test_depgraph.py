"""Tests for dependency graph construction and normalization."""

import numpy as np
import pytest

from jumpqueue import ConfigurationError, add_self_dependencies, build_dependency_graph


class TestSelfDependencies:

    def test_adds_missing_self_dependency(self):
        graph = build_dependency_graph(3, [[1], [], [0, 2]], has_conditional=True)
        for index in range(3):
            assert index in graph[index]
        assert graph[0] == frozenset({0, 1})
        assert graph[1] == frozenset({1})
        assert graph[2] == frozenset({0, 2})

    def test_idempotent(self):
        once = add_self_dependencies([[1], [0], []])
        twice = add_self_dependencies(once)
        assert once == twice

    def test_does_not_mutate_input(self):
        supplied = [[1], [0]]
        build_dependency_graph(2, supplied, has_conditional=True)
        assert supplied == [[1], [0]]

    def test_duplicates_collapse(self):
        graph = build_dependency_graph(2, [[1, 1, 0], [1]], has_conditional=True)
        assert graph[0] == frozenset({0, 1})


class TestInputForms:

    def test_mapping_with_missing_keys(self):
        graph = build_dependency_graph(3, {0: {0, 1}}, has_conditional=True)
        assert graph == [frozenset({0, 1}), frozenset({1}), frozenset({2})]

    def test_numpy_integer_indices(self):
        graph = build_dependency_graph(2, [np.array([1]), np.array([0])], has_conditional=True)
        assert graph[0] == frozenset({0, 1})

    def test_no_graph_without_conditional_jumps(self):
        assert build_dependency_graph(0, None, has_conditional=False) is None

    def test_graph_kept_without_conditional_jumps(self):
        graph = build_dependency_graph(1, [[]], has_conditional=False)
        assert graph == [frozenset({0})]


class TestConfigurationErrors:

    def test_missing_graph_with_conditional_jumps(self):
        with pytest.raises(ConfigurationError, match="dependency graph must be supplied"):
            build_dependency_graph(2, None, has_conditional=True)

    def test_wrong_length(self):
        with pytest.raises(ConfigurationError, match="2 entries but there are 3"):
            build_dependency_graph(3, [[0], [1]], has_conditional=True)

    def test_index_out_of_range(self):
        with pytest.raises(ConfigurationError, match="outside"):
            build_dependency_graph(2, [[0, 2], [1]], has_conditional=True)

    def test_mapping_key_out_of_range(self):
        with pytest.raises(ConfigurationError):
            build_dependency_graph(2, {5: [0]}, has_conditional=True)

    def test_non_integer_index(self):
        with pytest.raises(ConfigurationError, match="integer"):
            build_dependency_graph(2, [[0.5], [1]], has_conditional=True)

    def test_bool_index_rejected(self):
        with pytest.raises(ConfigurationError):
            build_dependency_graph(2, [[True], [1]], has_conditional=True)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            build_dependency_graph(1, None, has_conditional=True)
