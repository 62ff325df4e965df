from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

# Yosys numbers real wire bits from 2 upwards; 0 and 1 are the literal constants.
CONST_LOW = 0
CONST_HIGH = 1
CONSTANT_BITS = frozenset({CONST_LOW, CONST_HIGH})

BitId = int
NetKey = Tuple[BitId, ...]


def is_constant_bit(bit: BitId) -> bool:
    return bit in CONSTANT_BITS


class PortDirection(str, Enum):
    INPUT = "input"
    OUTPUT = "output"


@dataclass(frozen=True)
class PortIR:
    name: str
    direction: PortDirection
    bits: NetKey


@dataclass(frozen=True)
class CellIR:
    name: str
    type: str
    module: str
    port_dirs: Dict[str, PortDirection]
    connections: Dict[str, NetKey]
    src: Optional[str] = None

    def width(self, port: str) -> int:
        return len(self.connections[port])


@dataclass(frozen=True)
class ModuleIR:
    name: str
    ports: Dict[str, PortIR] = field(default_factory=dict)
    cells: Dict[str, CellIR] = field(default_factory=dict)
    # "owner.port" references whose bits held x/z, read as logic-0
    undefined_refs: Tuple[str, ...] = ()

    def instantiated_types(self) -> set[str]:
        return {cell.type for cell in self.cells.values()}
