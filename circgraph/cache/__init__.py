"""Circuit serialization and snapshot caching."""
from .graph_version import CircuitVersion
from .snapshot import (
    CircuitSnapshot,
    deserialize_circuit,
    load_snapshot,
    save_snapshot,
    serialize_circuit,
)

__all__ = [
    "CircuitVersion",
    "CircuitSnapshot",
    "deserialize_circuit",
    "load_snapshot",
    "save_snapshot",
    "serialize_circuit",
]
