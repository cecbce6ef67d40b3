"""
Unit tests for neatdrive.phenotype.network_base module and the decode helper.

Tests cover the evaluation order, the introspection
properties and the graphviz visualization.
"""

import graphviz
import pytest

from neatdrive.genotype  import Genome
from neatdrive.phenotype import NETWORK_TYPES, NetworkBase, NetworkFast, NetworkStandard, decode
from genome_helpers      import make_genome


@pytest.fixture
def genome():
    """2 inputs, 2 outputs, hidden 4 and 5; one split connection."""
    return make_genome([(0, 0, 2, 0.5, False), (1, 0, 4, 1.0), (2, 4, 2, 0.5), (3, 1, 5, 0.3), (4, 5, 3, -0.3)],
                       hidden=[5, 4])


# ============================================================================
# Test Evaluation Order
# ============================================================================

class TestEvaluationOrder:
    """Test NetworkBase evaluation order."""

    @pytest.mark.parametrize("network_class", [NetworkStandard, NetworkFast])
    def test_fixed_order_when_feed_forward(self, genome, network_class):
        network = network_class(genome)
        assert network.evaluation_order == [0, 1, 4, 5, 2, 3]

    def test_outputs_in_declared_order(self):
        genome = Genome(1, 3)
        assert NetworkStandard(genome).evaluation_order == [0, 1, 2, 3]

    def test_every_node_after_its_sources(self):
        genome  = make_genome([(0, 0, 6, 1.0), (1, 6, 5, 1.0), (2, 5, 4, 1.0), (3, 4, 2, 1.0)], hidden=[4, 5, 6])
        order   = NetworkStandard(genome).evaluation_order
        for conn in genome.connections:
            assert order.index(conn.from_node) < order.index(conn.to_node)


# ============================================================================
# Test Introspection
# ============================================================================

class TestIntrospection:
    """Test the node and connection counts."""

    @pytest.mark.parametrize("network_class", [NetworkStandard, NetworkFast])
    def test_counts(self, genome, network_class):
        network = network_class(genome)

        assert network.number_nodes               == 6
        assert network.number_nodes_hidden        == 2
        assert network.number_connections         == 5
        assert network.number_connections_enabled == 4

    def test_input_and_output_ids(self, genome):
        network = NetworkStandard(genome)
        assert network.input_ids  == [0, 1]
        assert network.output_ids == [2, 3]

    def test_repr(self, genome):
        assert repr(NetworkStandard(genome)) == "NetworkStandard(nodes=6, hidden=2, connections=4/5)"
        assert repr(NetworkFast(genome))     == "NetworkFast(nodes=6, hidden=2, connections=4/5)"

    def test_base_class_is_abstract(self, genome):
        with pytest.raises(TypeError):
            NetworkBase(genome)


# ============================================================================
# Test Visualization
# ============================================================================

class TestVisualize:
    """Test NetworkBase.visualize (no rendering)."""

    def test_returns_digraph(self, genome):
        dot = NetworkStandard(genome).visualize()
        assert isinstance(dot, graphviz.Digraph)

    def test_contains_all_nodes_and_connections(self, genome):
        source = NetworkStandard(genome).visualize().source

        for node_id in range(6):
            assert f"id={node_id}" in source
        for innovation_id in range(5):
            assert f"i={innovation_id}," in source

    def test_disabled_connections_drawn_grey(self, genome):
        source = NetworkStandard(genome).visualize().source
        disabled_edge = [line for line in source.splitlines() if "i=0," in line][0]
        assert "lightgray" in disabled_edge


# ============================================================================
# Test decode
# ============================================================================

class TestDecode:
    """Test the decode helper."""

    def test_default_is_standard(self, genome):
        assert isinstance(decode(genome), NetworkStandard)

    def test_fast(self, genome):
        assert isinstance(decode(genome, "fast"), NetworkFast)

    def test_known_types(self):
        assert set(NETWORK_TYPES) == {"standard", "fast"}

    def test_unknown_type(self, genome):
        with pytest.raises(ValueError, match="Unknown network type"):
            decode(genome, "recurrent")
