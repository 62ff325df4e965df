from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.graph import Device, Diagnostic, DiagnosticKind, Endpoint, net_key_label
from ..core.ir import BitId, NetKey, is_constant_bit
from .net_table import NetTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BitDriver:
    device_id: str
    port: str
    position: int


class CompileContext:
    """State owned by a single module's compilation."""

    def __init__(self, module_name: str, nets: NetTable):
        self.module_name = module_name
        self.nets = nets
        self.devices: Dict[str, Device] = {}
        self.bit_drivers: Dict[BitId, BitDriver] = {}
        self.device_ports: Dict[str, Dict[str, NetKey]] = {}
        self.diagnostics: List[Diagnostic] = []
        self._next_id = 0

    def new_device_id(self) -> str:
        device_id = f"dev{self._next_id}"
        self._next_id += 1
        self.device_ports[device_id] = {}
        return device_id

    @property
    def device_count(self) -> int:
        return self._next_id

    def add_device(self, device: Device) -> Device:
        self.devices[device.device_id] = device
        logger.debug(f"{self.module_name}: {device.device_id} {device.type_name} bits={device.bits}")
        return device

    def add_source(self, key: NetKey, device_id: str, port: str, track_bits: bool = False) -> None:
        key = tuple(key)
        self.nets.record_driver(key, Endpoint(device_id, port))
        if track_bits:
            for position, bit in enumerate(key):
                if is_constant_bit(bit):
                    continue
                self.bit_drivers.setdefault(bit, BitDriver(device_id, port, position))
        self.device_ports[device_id][port] = key

    def add_target(self, key: NetKey, device_id: str, port: str) -> None:
        key = tuple(key)
        self.nets.record_consumer(key, Endpoint(device_id, port))
        self.device_ports[device_id][port] = key

    def diagnose(
        self,
        kind: DiagnosticKind,
        message: str,
        net: Optional[NetKey] = None,
        device_id: Optional[str] = None,
    ) -> Diagnostic:
        diag = Diagnostic(kind=kind, module=self.module_name, message=message, net=net, device_id=device_id)
        self.diagnostics.append(diag)
        where = f" net {net_key_label(net)}" if net is not None else ""
        logger.warning(f"[{self.module_name}]{where} {message}")
        return diag
