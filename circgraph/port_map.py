from __future__ import annotations

from typing import Dict, Mapping

from .core.graph import BINARY_GATES, UNARY_GATES
from .core.ir import ModuleIR

UNARY_PORTS: Dict[str, str] = {"A": "in", "Y": "out"}
BINARY_PORTS: Dict[str, str] = {"A": "in1", "B": "in2", "Y": "out"}


class PortMapTable:
    """Formal cell port name -> display port name, per cell type."""

    def __init__(self, modules: Mapping[str, ModuleIR]):
        self.module_names = frozenset(modules)
        self.maps: Dict[str, Dict[str, str]] = {}
        for dtype in UNARY_GATES:
            self.maps[dtype.value] = UNARY_PORTS
        for dtype in BINARY_GATES:
            self.maps[dtype.value] = BINARY_PORTS
        for name, mod in modules.items():
            self.maps[name] = {pname: pname for pname in mod.ports}

    def port_map_for(self, cell_type: str) -> Mapping[str, str]:
        return self.maps.get(cell_type, {})

    def display_port(self, cell_type: str, formal: str) -> str:
        # unknown cell types keep their formal names
        return self.port_map_for(cell_type).get(formal, formal)
