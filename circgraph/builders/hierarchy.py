from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

import networkx as nx

from ..core.errors import HierarchyCycleError, NetlistFormatError, UnknownModuleError
from ..core.ir import ModuleIR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildOrder:
    order: Tuple[str, ...]  # children before parents
    top: str
    roots: Tuple[str, ...]

    @property
    def subcircuit_names(self) -> Tuple[str, ...]:
        return tuple(name for name in self.order if name != self.top)

    @property
    def ambiguous(self) -> bool:
        return len(self.roots) > 1


def module_dependencies(modules: Mapping[str, ModuleIR]) -> nx.DiGraph:
    """Edge child -> parent for every cell whose type is another module."""
    g = nx.DiGraph()
    # every module is a node even when nothing instantiates it
    g.add_nodes_from(modules)
    for name, mod in modules.items():
        for cell_type in mod.instantiated_types():
            if cell_type in modules:
                g.add_edge(cell_type, name)
    return g


def select_top(g: nx.DiGraph, roots: Tuple[str, ...]) -> str:
    # largest instantiation tree first, then name order
    ranked = sorted(roots, key=lambda r: (-len(nx.ancestors(g, r)), r))
    top = ranked[0]
    if len(roots) > 1:
        logger.warning(
            f"Several modules are not instantiated by any other: {', '.join(roots)}; "
            f"selected {top} as top level"
        )
    return top


def resolve_build_order(
    modules: Mapping[str, ModuleIR],
    top_module: Optional[str] = None,
) -> BuildOrder:
    if not modules:
        raise NetlistFormatError("Netlist contains no modules")

    g = module_dependencies(modules)
    try:
        order = list(nx.lexicographical_topological_sort(g))
    except nx.NetworkXUnfeasible:
        cycle = nx.find_cycle(g)
        raise HierarchyCycleError([(u, v) for u, v in cycle]) from None

    roots = tuple(sorted(n for n in g if g.out_degree(n) == 0))

    if top_module is not None:
        if top_module not in g:
            raise UnknownModuleError(top_module, modules)
        top = top_module
        parents = sorted(g.successors(top))
        if parents:
            logger.warning(f"Top module {top} is itself instantiated by {', '.join(parents)}")
    else:
        top = select_top(g, roots)

    if top in roots:
        order.remove(top)
        order.append(top)

    logger.info(f"Build order: {' -> '.join(order)} (top: {top})")
    return BuildOrder(order=tuple(order), top=top, roots=roots)
