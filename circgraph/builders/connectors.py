from __future__ import annotations

from typing import List

from ..core.graph import Connector, DiagnosticKind
from .context import CompileContext


def emit_connectors(ctx: CompileContext) -> List[Connector]:
    """One connector per (driver, consumer) pair; undriven nets are reported and skipped."""
    connectors: List[Connector] = []
    for key, net in ctx.nets.snapshot():
        if net.driver is None:
            readers = ", ".join(f"{e.device_id}.{e.port}" for e in net.consumers) or "nothing"
            ctx.diagnose(DiagnosticKind.UNDRIVEN_NET, f"undriven net (read by {readers})", net=key)
            continue
        for consumer in net.consumers:
            connectors.append(Connector(source=net.driver, target=consumer))
    return connectors
