from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .ir import NetKey


class DeviceType(str, Enum):
    INPUT = "$input"
    OUTPUT = "$output"

    NOT = "$not"
    AND = "$and"
    OR = "$or"
    XOR = "$xor"
    XNOR = "$xnor"

    BUS_GROUP = "$busgroup"
    BUS_SLICE = "$busslice"
    CONSTANT = "$constant"

    # interactive terminals, only on the top-level circuit
    BUTTON = "$button"
    LAMP = "$lamp"
    NUM_ENTRY = "$numentry"
    NUM_DISPLAY = "$numdisplay"

    # carry the raw cell type
    SUBCIRCUIT = "subcircuit"
    OPAQUE = "opaque"


UNARY_GATES = frozenset({DeviceType.NOT})
BINARY_GATES = frozenset({DeviceType.AND, DeviceType.OR, DeviceType.XOR, DeviceType.XNOR})
PRIMITIVE_GATES = UNARY_GATES | BINARY_GATES


def primitive_type(cell_type: str) -> Optional[DeviceType]:
    try:
        dtype = DeviceType(cell_type)
    except ValueError:
        return None
    return dtype if dtype in PRIMITIVE_GATES else None


class Polarity(int, Enum):
    LOW = -1
    HIGH = 1


class DiagnosticKind(str, Enum):
    UNDRIVEN_NET = "undriven_net"
    UNVALIDATED_CELL = "unvalidated_cell"
    UNDEFINED_BIT = "undefined_bit"
    AMBIGUOUS_TOP = "ambiguous_top"


@dataclass(frozen=True)
class Endpoint:
    device_id: str
    port: str


@dataclass(frozen=True)
class Connector:
    source: Endpoint
    target: Endpoint


@dataclass(frozen=True)
class SliceSpec:
    first: int
    count: int
    total: int


@dataclass(frozen=True)
class Device:
    device_id: str
    type: DeviceType
    label: Optional[str] = None
    bits: Optional[int] = None

    # SUBCIRCUIT / OPAQUE
    cell_type: Optional[str] = None

    # port terminals
    net: Optional[str] = None
    order: Optional[int] = None

    groups: Tuple[int, ...] = ()
    slice_spec: Optional[SliceSpec] = None
    constant: Tuple[Polarity, ...] = ()

    position: Optional[Tuple[float, float]] = None

    @property
    def type_name(self) -> str:
        if self.type in (DeviceType.SUBCIRCUIT, DeviceType.OPAQUE):
            return self.cell_type or self.type.value
        return self.type.value


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    module: str
    message: str
    net: Optional[NetKey] = None
    device_id: Optional[str] = None


@dataclass(frozen=True)
class CompiledModuleGraph:
    name: str
    devices: Dict[str, Device] = field(default_factory=dict)
    connectors: Tuple[Connector, ...] = ()
    subcircuits: Dict[str, "CompiledModuleGraph"] = field(default_factory=dict)
    diagnostics: Tuple[Diagnostic, ...] = ()
    width: Optional[float] = None
    height: Optional[float] = None

    def connectors_from(self, device_id: str) -> list[Connector]:
        return [c for c in self.connectors if c.source.device_id == device_id]

    def connectors_to(self, device_id: str) -> list[Connector]:
        return [c for c in self.connectors if c.target.device_id == device_id]

    def devices_of_type(self, dtype: DeviceType) -> list[Device]:
        return [d for d in self.devices.values() if d.type == dtype]

    def all_diagnostics(self) -> list[Diagnostic]:
        out = list(self.diagnostics)
        for sub in self.subcircuits.values():
            out.extend(sub.all_diagnostics())
        return out


def net_key_label(key: NetKey) -> str:
    return "[" + ", ".join(str(b) for b in key) + "]"
