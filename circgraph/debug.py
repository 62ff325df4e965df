from __future__ import annotations

from collections import Counter

from .core.graph import CompiledModuleGraph


def print_circuit_summary(graph: CompiledModuleGraph) -> None:
    print(f"===== CIRCUIT SUMMARY: {graph.name} =====")
    print(f"Devices       : {len(graph.devices)}")
    print(f"Connectors    : {len(graph.connectors)}")
    print(f"Subcircuits   : {len(graph.subcircuits)}")
    print(f"Diagnostics   : {len(graph.all_diagnostics())}")
    counts = Counter(dev.type_name for dev in graph.devices.values())
    for type_name, count in sorted(counts.items()):
        print(f"  {type_name:<14}: {count}")
    print("=========================")
    for name, sub in graph.subcircuits.items():
        print(f"  {name}: {len(sub.devices)} devices, {len(sub.connectors)} connectors")


def trace_device(graph: CompiledModuleGraph, device_id: str) -> None:
    print("\n===== TRACE DEVICE:", device_id, "=====")
    device = graph.devices.get(device_id)
    if device is None:
        print("No such device.")
        print("=========================")
        return
    print("Type :", device.type_name, "label:", device.label, "bits:", device.bits)
    for conn in graph.connectors_to(device_id):
        print("  <-", f"{conn.source.device_id}.{conn.source.port}", "->", conn.target.port)
    for conn in graph.connectors_from(device_id):
        print("  ->", conn.source.port, "->", f"{conn.target.device_id}.{conn.target.port}")
    print("=========================")


def plot_circuit(graph: CompiledModuleGraph, limit: int = 60) -> None:
    try:
        import matplotlib.pyplot as plt
        import networkx as nx
    except Exception as exc:
        print("Plot skipped:", exc)
        return

    g = nx.DiGraph()
    for did, dev in graph.devices.items():
        g.add_node(did, label=dev.label or dev.type_name)
    for conn in graph.connectors:
        g.add_edge(conn.source.device_id, conn.target.device_id)

    h = g.subgraph(list(graph.devices)[:limit])
    labels = {n: h.nodes[n]["label"].replace("$", "") for n in h.nodes()}

    nx.draw(h, labels=labels, with_labels=True, node_size=500, font_size=6)
    plt.show()
