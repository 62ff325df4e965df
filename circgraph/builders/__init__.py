"""Per-module lowering and hierarchy assembly."""
from .hierarchy import BuildOrder, module_dependencies, resolve_build_order
from .module_build import compile_module
from .net_table import Net, NetTable, build_net_table
from .toplevel import assemble_toplevel

__all__ = [
    "BuildOrder",
    "module_dependencies",
    "resolve_build_order",
    "compile_module",
    "Net",
    "NetTable",
    "build_net_table",
    "assemble_toplevel",
]
