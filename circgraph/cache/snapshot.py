"""
Circuit serialization and JSON snapshots.

The serialized form is the plain-record tree the DigitalJS front end reads:
devices keyed by id, connectors as a list of from/to endpoints, and nested
subcircuits keyed by module name. Diagnostics are not part of it.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.graph import (
    CompiledModuleGraph,
    Connector,
    Device,
    DeviceType,
    Endpoint,
    Polarity,
    SliceSpec,
)
from .graph_version import CircuitVersion


@dataclass
class CircuitSnapshot:
    version: CircuitVersion
    circuit: CompiledModuleGraph


def _serialize_endpoint(endpoint: Endpoint) -> dict:
    return {"id": endpoint.device_id, "port": endpoint.port}


def _deserialize_endpoint(data: dict) -> Endpoint:
    return Endpoint(device_id=data["id"], port=data["port"])


def _serialize_device(device: Device) -> dict:
    out: Dict[str, Any] = {"type": device.type_name}
    if device.label is not None:
        out["label"] = device.label
    if device.net is not None:
        out["net"] = device.net
    if device.order is not None:
        out["order"] = device.order
    if device.bits is not None:
        out["bits"] = device.bits
    if device.type == DeviceType.BUS_GROUP:
        out["groups"] = list(device.groups)
    if device.slice_spec is not None:
        out["slice"] = {
            "first": device.slice_spec.first,
            "count": device.slice_spec.count,
            "total": device.slice_spec.total,
        }
    if device.type == DeviceType.CONSTANT:
        out["constant"] = [p.value for p in device.constant]
    if device.position is not None:
        out["x"], out["y"] = device.position
    return out


def _deserialize_device(device_id: str, data: dict, module_names) -> Device:
    type_name = data["type"]
    try:
        dtype = DeviceType(type_name)
        cell_type = None
    except ValueError:
        dtype = DeviceType.SUBCIRCUIT if type_name in module_names else DeviceType.OPAQUE
        cell_type = type_name

    slice_data = data.get("slice")
    position = (data["x"], data["y"]) if "x" in data and "y" in data else None
    return Device(
        device_id=device_id,
        type=dtype,
        label=data.get("label"),
        bits=data.get("bits"),
        cell_type=cell_type,
        net=data.get("net"),
        order=data.get("order"),
        groups=tuple(data.get("groups", ())),
        slice_spec=SliceSpec(**slice_data) if slice_data else None,
        constant=tuple(Polarity(v) for v in data.get("constant", ())),
        position=position,
    )


def serialize_circuit(graph: CompiledModuleGraph) -> dict:
    out: Dict[str, Any] = {
        "devices": {did: _serialize_device(dev) for did, dev in graph.devices.items()},
        "connectors": [
            {"from": _serialize_endpoint(c.source), "to": _serialize_endpoint(c.target)}
            for c in graph.connectors
        ],
    }
    if graph.subcircuits:
        out["subcircuits"] = {name: serialize_circuit(sub) for name, sub in graph.subcircuits.items()}
    if graph.width is not None:
        out["width"] = graph.width
    if graph.height is not None:
        out["height"] = graph.height
    return out


def deserialize_circuit(data: dict, name: str = "top", module_names=None) -> CompiledModuleGraph:
    sub_data = data.get("subcircuits", {})
    if module_names is None:
        module_names = set(sub_data)
    subcircuits = {
        sub_name: deserialize_circuit(sub, sub_name, module_names)
        for sub_name, sub in sub_data.items()
    }
    devices = {
        did: _deserialize_device(did, dev, module_names)
        for did, dev in data.get("devices", {}).items()
    }
    connectors = tuple(
        Connector(source=_deserialize_endpoint(c["from"]), target=_deserialize_endpoint(c["to"]))
        for c in data.get("connectors", [])
    )
    return CompiledModuleGraph(
        name=name,
        devices=devices,
        connectors=connectors,
        subcircuits=subcircuits,
        width=data.get("width"),
        height=data.get("height"),
    )


def save_snapshot(
    snapshot: CircuitSnapshot,
    filepath: Path | str,
    indent: Optional[int] = None,
) -> None:
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "version": {
            "source_hash": snapshot.version.source_hash,
            "tool_version": snapshot.version.tool_version,
        },
        "name": snapshot.circuit.name,
        "circuit": serialize_circuit(snapshot.circuit),
    }
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)


def load_snapshot(filepath: Path | str) -> CircuitSnapshot:
    filepath = Path(filepath)
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)

    version_data = data["version"]
    version = CircuitVersion(
        source_hash=version_data["source_hash"],
        tool_version=version_data.get("tool_version", ""),
    )
    circuit = deserialize_circuit(data["circuit"], name=data.get("name", "top"))
    return CircuitSnapshot(version=version, circuit=circuit)
