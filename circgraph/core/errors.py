from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple


class NetlistError(RuntimeError):
    """Base class for every fatal netlist compilation error."""


class NetlistFormatError(NetlistError):
    pass


class PortDirectionError(NetlistError):
    def __init__(self, module: str, owner: str, port: str, direction: object):
        self.module = module
        self.owner = owner
        self.port = port
        self.direction = direction
        super().__init__(
            f"Invalid port direction {direction!r} for {owner}.{port} in module {module}"
        )


class MultipleDriverError(NetlistError):
    def __init__(self, module: str, net: Tuple[int, ...], existing, new):
        self.module = module
        self.net = net
        self.existing = existing
        self.new = new
        super().__init__(
            f"Net {list(net)} in module {module} already driven by "
            f"{existing.device_id}.{existing.port}, cannot add driver "
            f"{new.device_id}.{new.port}"
        )


class WidthMismatchError(NetlistError):
    def __init__(self, module: str, cell: str, cell_type: str, widths: dict):
        self.module = module
        self.cell = cell
        self.cell_type = cell_type
        self.widths = dict(widths)
        detail = ", ".join(f"{p}={w}" for p, w in self.widths.items())
        super().__init__(
            f"Port width mismatch on {cell_type} cell {cell} in module {module}: {detail}"
        )


class HierarchyCycleError(NetlistError):
    def __init__(self, cycle: Sequence[Tuple[str, str]]):
        self.cycle = list(cycle)
        path = " -> ".join([child for child, _ in self.cycle] + [self.cycle[0][0]]) if self.cycle else "?"
        super().__init__(f"Cyclic module hierarchy: {path}")


class UnknownModuleError(NetlistError):
    def __init__(self, name: str, known: Iterable[str]):
        self.name = name
        self.known = sorted(known)
        super().__init__(f"Unknown module {name!r}; known modules: {', '.join(self.known)}")


class SliceSourceError(NetlistError):
    def __init__(self, module: str, net: Tuple[int, ...], drivers: List[Tuple[str, str]]):
        self.module = module
        self.net = net
        self.drivers = drivers
        names = ", ".join(f"{d}.{p}" for d, p in drivers)
        super().__init__(
            f"Bus slice for net {list(net)} in module {module} has several drivers: {names}"
        )


class UndrivenNetError(NetlistError):
    def __init__(self, module: str, nets: List[Tuple[int, ...]]):
        self.module = module
        self.nets = list(nets)
        shown = "; ".join(str(list(n)) for n in self.nets[:5])
        more = f" (+{len(self.nets) - 5} more)" if len(self.nets) > 5 else ""
        super().__init__(f"Module {module} has {len(self.nets)} undriven net(s): {shown}{more}")

