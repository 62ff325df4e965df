from __future__ import annotations

import logging

from ..core.errors import UndrivenNetError
from ..core.graph import CompiledModuleGraph, DiagnosticKind
from ..core.ir import ModuleIR
from ..port_map import PortMapTable
from .bus_reconcile import reconcile_buses
from .connectors import emit_connectors
from .context import CompileContext
from .device_synth import add_cell_devices, add_port_devices
from .net_table import build_net_table

logger = logging.getLogger(__name__)


def compile_module(
    module: ModuleIR,
    port_maps: PortMapTable,
    strict_undriven: bool = False,
) -> CompiledModuleGraph:
    """
    Lower one module into a device graph.

    Steps: intern nets -> port and cell devices -> bus reconciliation
    (group, constant, slice) -> connectors and undriven-net diagnostics.
    """
    logger.info(f"Compiling module {module.name}...")
    ctx = CompileContext(module.name, build_net_table(module))

    for ref in module.undefined_refs:
        ctx.diagnose(DiagnosticKind.UNDEFINED_BIT, f"undefined (x/z) bits in {ref} read as logic-0")

    add_port_devices(ctx, module)
    add_cell_devices(ctx, module, port_maps)
    reconcile_buses(ctx)
    connectors = emit_connectors(ctx)

    if strict_undriven:
        undriven = [d.net for d in ctx.diagnostics if d.kind == DiagnosticKind.UNDRIVEN_NET]
        if undriven:
            raise UndrivenNetError(module.name, undriven)

    logger.info(
        f"Module {module.name} compiled: {len(ctx.devices)} devices, {len(connectors)} connectors, "
        f"{len(ctx.nets)} nets"
    )
    return CompiledModuleGraph(
        name=module.name,
        devices=dict(ctx.devices),
        connectors=tuple(connectors),
        diagnostics=tuple(ctx.diagnostics),
    )
