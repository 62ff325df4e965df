from __future__ import annotations

from typing import Dict

from ..core.errors import NetlistFormatError, PortDirectionError, WidthMismatchError
from ..core.graph import BINARY_GATES, Device, DeviceType, DiagnosticKind, primitive_type
from ..core.ir import CellIR, ModuleIR, PortDirection
from ..port_map import PortMapTable
from ..utils import parse_src
from .context import CompileContext

GATE_INPUTS: Dict[DeviceType, tuple] = {DeviceType.NOT: ("A",)}
GATE_INPUTS.update({dtype: ("A", "B") for dtype in BINARY_GATES})
GATE_OUTPUT = "Y"


def add_port_devices(ctx: CompileContext, module: ModuleIR) -> None:
    for pname, port in module.ports.items():
        device_id = ctx.new_device_id()
        if port.direction == PortDirection.INPUT:
            dtype = DeviceType.INPUT
            ctx.add_source(port.bits, device_id, "out", track_bits=True)
        elif port.direction == PortDirection.OUTPUT:
            dtype = DeviceType.OUTPUT
            ctx.add_target(port.bits, device_id, "in")
        else:
            raise PortDirectionError(module.name, module.name, pname, port.direction)

        ctx.add_device(
            Device(
                device_id=device_id,
                type=dtype,
                label=pname,
                bits=len(port.bits),
                net=pname,
                order=ctx.device_count,
            )
        )


def gate_width(cell: CellIR, dtype: DeviceType) -> int:
    """Check the ports of a primitive gate cell and return its bit width."""
    expected = {p: PortDirection.INPUT for p in GATE_INPUTS[dtype]}
    expected[GATE_OUTPUT] = PortDirection.OUTPUT

    for pname, direction in expected.items():
        if pname not in cell.port_dirs:
            raise NetlistFormatError(
                f"{cell.type} cell {cell.name} in module {cell.module} has no port {pname}"
            )
        if cell.port_dirs[pname] != direction:
            raise PortDirectionError(cell.module, cell.name, pname, cell.port_dirs[pname].value)

    widths = {pname: cell.width(pname) for pname in expected}
    if len(set(widths.values())) != 1:
        raise WidthMismatchError(cell.module, cell.name, cell.type, widths)
    return widths[GATE_OUTPUT]


def add_cell_device(
    ctx: CompileContext,
    cell: CellIR,
    port_maps: PortMapTable,
) -> Device:
    device_id = ctx.new_device_id()

    dtype = primitive_type(cell.type)
    if dtype is not None:
        device = Device(device_id=device_id, type=dtype, label=cell.name, bits=gate_width(cell, dtype))
    elif cell.type in port_maps.module_names:
        device = Device(device_id=device_id, type=DeviceType.SUBCIRCUIT, label=cell.name, cell_type=cell.type)
    else:
        device = Device(device_id=device_id, type=DeviceType.OPAQUE, label=cell.name, cell_type=cell.type)
        file, line = parse_src(cell.src)
        origin = f" ({file}:{line})" if file else ""
        ctx.diagnose(
            DiagnosticKind.UNVALIDATED_CELL,
            f"cell {cell.name} has unrecognized type {cell.type}{origin}; widths not validated",
            device_id=device_id,
        )

    for pname, pdir in cell.port_dirs.items():
        display = port_maps.display_port(cell.type, pname)
        bits = cell.connections[pname]
        if pdir == PortDirection.INPUT:
            ctx.add_target(bits, device_id, display)
        elif pdir == PortDirection.OUTPUT:
            ctx.add_source(bits, device_id, display, track_bits=True)
        else:
            raise PortDirectionError(cell.module, cell.name, pname, pdir)

    return ctx.add_device(device)


def add_cell_devices(
    ctx: CompileContext,
    module: ModuleIR,
    port_maps: PortMapTable,
) -> None:
    for cell in module.cells.values():
        add_cell_device(ctx, cell, port_maps)
