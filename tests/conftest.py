import pytest

from peerwatch.registry import ConnectionRegistry


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def two_peers(registry):
    """Scenario registry: node 1 at "b", node 2 at "a", in that order."""
    registry.connect("b", "/Satoshi:0.9.0/", 0.2)
    registry.connect("a", "/Satoshi:0.8.6/", 0.1)
    return registry
