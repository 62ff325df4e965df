from __future__ import annotations

import dataclasses
from typing import Dict, Tuple

import networkx as nx

from .core.graph import CompiledModuleGraph

MARGIN = 32
LAYER_SPACING = 128
NODE_SPACING = 64


def connector_graph(graph: CompiledModuleGraph) -> nx.DiGraph:
    g = nx.DiGraph()
    g.add_nodes_from(graph.devices)
    for conn in graph.connectors:
        g.add_edge(conn.source.device_id, conn.target.device_id)
    return g


def device_layers(g: nx.DiGraph) -> Dict[str, int]:
    """Signal-flow layer per device; feedback loops share one layer."""
    cond = nx.condensation(g)
    members = cond.graph["mapping"]
    scc_layer: Dict[int, int] = {}
    for layer, generation in enumerate(nx.topological_generations(cond)):
        for scc in generation:
            scc_layer[scc] = layer
    return {node: scc_layer[members[node]] for node in g}


def layout_circuit(graph: CompiledModuleGraph) -> CompiledModuleGraph:
    subcircuits = {name: layout_circuit(sub) for name, sub in graph.subcircuits.items()}

    g = connector_graph(graph)
    layers = device_layers(g) if len(g) else {}

    creation = {did: index for index, did in enumerate(graph.devices)}
    by_layer: Dict[int, list] = {}
    for did, layer in layers.items():
        by_layer.setdefault(layer, []).append(did)

    positions: Dict[str, Tuple[float, float]] = {}
    for layer, members in by_layer.items():
        members.sort(key=creation.__getitem__)
        for row, did in enumerate(members):
            positions[did] = (float(MARGIN + layer * LAYER_SPACING), float(MARGIN + row * NODE_SPACING))

    devices = {
        did: dataclasses.replace(dev, position=positions.get(did))
        for did, dev in graph.devices.items()
    }
    max_x = max((p[0] for p in positions.values()), default=0.0)
    max_y = max((p[1] for p in positions.values()), default=0.0)

    return dataclasses.replace(
        graph,
        devices=devices,
        subcircuits=subcircuits,
        width=max_x + 256,
        height=max_y + 64,
    )
