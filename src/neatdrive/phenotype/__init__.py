"""
Phenotype Package

This package decodes genomes into executable feed-forward networks.

Exported:
    NetworkBase:     Abstract base class of all decoded networks
    NetworkStandard: Object-oriented network, one input vector at a time
    NetworkFast:     Numpy network, batches of input vectors
    NodeType:        Node type enumeration (INPUT, HIDDEN, OUTPUT)
    decode:          Decode a genome with the named network backend
"""

from typing import TYPE_CHECKING

from neatdrive.phenotype.network_base     import NetworkBase, NodeType
from neatdrive.phenotype.network_standard import NetworkStandard
from neatdrive.phenotype.network_fast     import NetworkFast

if TYPE_CHECKING:
    from neatdrive.genotype import Genome

NETWORK_TYPES = {
    "standard": NetworkStandard,
    "fast"    : NetworkFast,
}

def decode(genome: 'Genome', network_type: str = "standard") -> NetworkBase:
    """
    Decode a genome into a network.

    Parameters:
        genome:       the genome to decode
        network_type: "standard" or "fast"

    Returns:
        the decoded network

    Raises:
        ValueError: if 'network_type' is not a known backend
    """
    if network_type not in NETWORK_TYPES:
        raise ValueError(f"Unknown network type '{network_type}', expected one of {sorted(NETWORK_TYPES)}")
    return NETWORK_TYPES[network_type](genome)

__all__ = [
    'NetworkBase',
    'NetworkStandard',
    'NetworkFast',
    'NodeType',
    'NETWORK_TYPES',
    'decode',
]
