"""
circgraph - Yosys netlist to DigitalJS circuit graphs

Lowers the flattened, bit-indexed modules of a Yosys JSON netlist into
devices and connectors, rebuilding buses with $busgroup, $busslice and
$constant devices.
"""

__version__ = "0.3.0"

from .core.graph import CompiledModuleGraph, Device, DeviceType, Polarity
from .pipeline import CircuitPipeline, compile_netlist
from .utils.config import CompileConfig, YosysConfig

__all__ = [
    "CompiledModuleGraph",
    "Device",
    "DeviceType",
    "Polarity",
    "CircuitPipeline",
    "compile_netlist",
    "CompileConfig",
    "YosysConfig",
]
