from __future__ import annotations

import dataclasses
from typing import Dict, Mapping

from ..core.graph import CompiledModuleGraph, Device, DeviceType

# terminal type -> (1-bit variant, multi-bit variant)
INTERACTIVE_TERMINALS = {
    DeviceType.INPUT: (DeviceType.BUTTON, DeviceType.NUM_ENTRY),
    DeviceType.OUTPUT: (DeviceType.LAMP, DeviceType.NUM_DISPLAY),
}


def interactive_terminal(device: Device) -> Device:
    variants = INTERACTIVE_TERMINALS.get(device.type)
    if variants is None:
        return device
    single, multi = variants
    return dataclasses.replace(device, type=single if device.bits == 1 else multi)


def assemble_toplevel(
    compiled: Mapping[str, CompiledModuleGraph],
    top: str,
    interactive_io: bool = True,
) -> CompiledModuleGraph:
    """Attach every other compiled module under the top-level graph."""
    top_graph = compiled[top]
    devices: Dict[str, Device] = dict(top_graph.devices)
    if interactive_io:
        devices = {did: interactive_terminal(dev) for did, dev in devices.items()}

    subcircuits = {name: graph for name, graph in compiled.items() if name != top}
    return dataclasses.replace(top_graph, devices=devices, subcircuits=subcircuits)
