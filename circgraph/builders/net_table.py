from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from ..core.errors import MultipleDriverError
from ..core.graph import Endpoint
from ..core.ir import ModuleIR, NetKey


@dataclass
class Net:
    driver: Optional[Endpoint] = None
    consumers: List[Endpoint] = field(default_factory=list)


class NetTable:
    """
    Nets of one module keyed by their exact bit sequence.

    Two keys name the same net only when they hold the same bits in the same
    order; reorderings and subsets are distinct nets.
    """

    def __init__(self, module_name: str):
        self.module_name = module_name
        self._nets: Dict[NetKey, Net] = {}

    def intern(self, key: NetKey) -> Net:
        key = tuple(key)
        net = self._nets.get(key)
        if net is None:
            net = Net()
            self._nets[key] = net
        return net

    def record_driver(self, key: NetKey, endpoint: Endpoint) -> None:
        net = self.intern(key)
        if net.driver is not None:
            raise MultipleDriverError(self.module_name, tuple(key), net.driver, endpoint)
        net.driver = endpoint

    def record_consumer(self, key: NetKey, endpoint: Endpoint) -> None:
        self.intern(key).consumers.append(endpoint)

    def get(self, key: NetKey) -> Optional[Net]:
        return self._nets.get(tuple(key))

    def snapshot(self) -> List[Tuple[NetKey, Net]]:
        return list(self._nets.items())

    def undriven(self) -> List[NetKey]:
        return [key for key, net in self._nets.items() if net.driver is None]

    def __contains__(self, key) -> bool:
        return tuple(key) in self._nets

    def __iter__(self) -> Iterator[NetKey]:
        return iter(self._nets)

    def __len__(self) -> int:
        return len(self._nets)


def build_net_table(module: ModuleIR) -> NetTable:
    nets = NetTable(module.name)
    for port in module.ports.values():
        nets.intern(port.bits)
    for cell in module.cells.values():
        for pname in cell.port_dirs:
            nets.intern(cell.connections[pname])
    return nets
