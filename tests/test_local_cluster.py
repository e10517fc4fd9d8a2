"""Tests for sweep sets, conductance and the local clustering entry points."""

import numpy as np
import pytest

from stagkit.cluster import (
    conductance,
    local_cluster,
    local_cluster_acl,
    sweep_set_conductance,
)
from stagkit.graph import (
    Graph,
    barbell_graph,
    complete_graph,
    cycle_graph,
    sbm,
    sparse_column,
)


class TestConductance:
    """Direct conductance computation."""

    def test_barbell_half(self) -> None:
        g = barbell_graph(5)
        # One bridge edge, each clique has volume 5 * 4 + 1 = 21.
        assert conductance(g, range(5)) == pytest.approx(1 / 21)

    def test_single_vertex_of_complete_graph(self) -> None:
        assert conductance(complete_graph(4), [0]) == pytest.approx(1.0)

    def test_whole_graph_is_infinite(self) -> None:
        assert conductance(cycle_graph(5), range(5)) == float("inf")


class TestSweepSet:
    """Incremental sweep over a vector's support."""

    def test_finds_clique_of_barbell(self) -> None:
        g = barbell_graph(5)
        vector = sparse_column({0: 0.9, 1: 0.8, 2: 0.7, 3: 0.6, 4: 0.5, 5: 0.1})
        assert sweep_set_conductance(g, vector) == [0, 1, 2, 3, 4]

    def test_order_is_by_value_descending(self) -> None:
        g = barbell_graph(5)
        vector = sparse_column({4: 0.9, 2: 0.8, 0: 0.7, 1: 0.6, 3: 0.5})
        assert sweep_set_conductance(g, vector) == [4, 2, 0, 1, 3]

    def test_empty_support(self) -> None:
        g = cycle_graph(5)
        assert sweep_set_conductance(g, sparse_column({})) == []

    def test_zero_degree_support(self) -> None:
        g = cycle_graph(5)
        assert sweep_set_conductance(g, sparse_column({50: 1.0})) == []

    def test_self_loops_are_not_boundary(self) -> None:
        adj = np.array(
            [
                [5.0, 1.0, 0.0],
                [1.0, 0.0, 1.0],
                [0.0, 1.0, 0.0],
            ]
        )
        g = Graph(adj)
        # {0}: cut 1, volume 6. {0, 1}: cut 1, volume 8.
        assert sweep_set_conductance(g, sparse_column({0: 1.0, 1: 0.5})) == [0, 1]

    def test_whole_support_volume_is_degenerate(self) -> None:
        # Support covering the whole graph has zero cut: the documented
        # caller responsibility is violated and the whole graph is returned.
        g = cycle_graph(6)
        vector = sparse_column({v: 1.0 / (v + 1) for v in range(6)})
        assert sorted(sweep_set_conductance(g, vector)) == list(range(6))


class TestLocalClusterACL:
    """The ACL algorithm from a seed vertex."""

    def test_barbell_left_clique(self) -> None:
        g = barbell_graph(10)
        cluster = local_cluster_acl(g, 0, 0.3, 0.001)
        assert sorted(cluster) == list(range(10))

    def test_barbell_right_clique(self) -> None:
        g = barbell_graph(10)
        cluster = local_cluster_acl(g, 15, 0.3)
        assert sorted(cluster) == list(range(10, 20))

    def test_sbm_block_recovered(self) -> None:
        g = sbm(200, 4, 0.3, 0.002, np.random.default_rng(11))
        cluster = set(local_cluster_acl(g, 0, 0.2, 1e-3))
        block = set(range(50))
        assert len(cluster & block) >= 40
        assert len(cluster - block) <= 10

    def test_large_error_keeps_support_in_one_clique(self) -> None:
        g = barbell_graph(6)
        cluster = local_cluster_acl(g, 7, 0.5, 0.01)
        assert 7 in cluster
        assert sorted(cluster) == list(range(6, 12))

    def test_negative_seed_rejected(self) -> None:
        with pytest.raises(ValueError, match="seed_vertex"):
            local_cluster_acl(cycle_graph(5), -1, 0.1)


class TestLocalCluster:
    """Target-volume local clustering."""

    def test_barbell_clique_for_clique_volume(self) -> None:
        g = barbell_graph(10)
        cluster = local_cluster(g, 3, target_volume=90)
        assert sorted(cluster) == list(range(10))

    def test_volume_reaches_target_when_possible(self) -> None:
        g = cycle_graph(200)
        cluster = local_cluster(g, 0, target_volume=40)
        assert sum(g.vertices_degree(cluster)) >= 40

    def test_non_positive_target_rejected(self) -> None:
        with pytest.raises(ValueError, match="target_volume"):
            local_cluster(cycle_graph(5), 0, 0)
