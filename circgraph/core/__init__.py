"""Input netlist IR and compiled circuit graph model."""
from .graph import (
    CompiledModuleGraph,
    Connector,
    Device,
    DeviceType,
    Diagnostic,
    DiagnosticKind,
    Endpoint,
    Polarity,
    SliceSpec,
)
from .ir import CONST_HIGH, CONST_LOW, CellIR, ModuleIR, NetKey, PortDirection, PortIR

__all__ = [
    "CompiledModuleGraph",
    "Connector",
    "Device",
    "DeviceType",
    "Diagnostic",
    "DiagnosticKind",
    "Endpoint",
    "Polarity",
    "SliceSpec",
    "CONST_HIGH",
    "CONST_LOW",
    "CellIR",
    "ModuleIR",
    "NetKey",
    "PortDirection",
    "PortIR",
]
