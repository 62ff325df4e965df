from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .builders import assemble_toplevel, compile_module, resolve_build_order
from .builders.hierarchy import BuildOrder
from .cache import CircuitSnapshot, CircuitVersion, load_snapshot, save_snapshot
from .core.graph import CompiledModuleGraph, Diagnostic, DiagnosticKind
from .core.ir import ModuleIR
from .emit import write_html
from .layout import layout_circuit
from .parsers.yosys_parser import build_modules, load_yosys_json, parse_yosys
from .port_map import PortMapTable
from .utils import CompileConfig, YosysConfig, compute_file_hash, stable_hash

logger = logging.getLogger(__name__)


class CircuitPipeline:
    """
    Yosys JSON netlist -> DigitalJS circuit.

    Usage:
        pipeline = CircuitPipeline(CompileConfig(layout=True))
        pipeline.load_netlist("design.json")
        circuit = pipeline.compile()
        pipeline.write_html("design.html")
    """

    def __init__(self, config: Optional[CompileConfig] = None):
        self.config = config or CompileConfig()

        self.modules: Optional[Dict[str, ModuleIR]] = None
        self.build_order: Optional[BuildOrder] = None
        self.compiled: Dict[str, CompiledModuleGraph] = {}
        self.circuit: Optional[CompiledModuleGraph] = None

        self.source_hash = ""

    def load_yosys(self, yosys: dict) -> None:
        self.modules = build_modules(yosys)
        self.source_hash = stable_hash(json.dumps(yosys, sort_keys=True), length=16)
        self.circuit = None
        logger.info(f"Loaded {len(self.modules)} module(s)")

    def load_netlist(self, path: str | Path) -> None:
        self.load_yosys(load_yosys_json(str(path)))
        self.source_hash = compute_file_hash(path)

    def run_yosys(self, yosys_config: YosysConfig) -> None:
        self.load_yosys(parse_yosys(yosys_config))
        self.source_hash = compute_file_hash(yosys_config.out_json)
        if self.config.top_module is None:
            self.config.top_module = yosys_config.top_module

    def compile(self) -> CompiledModuleGraph:
        if self.modules is None:
            raise RuntimeError("No netlist loaded. Call load_netlist() or load_yosys() first.")

        self.build_order = resolve_build_order(self.modules, self.config.top_module)
        port_maps = PortMapTable(self.modules)

        self.compiled = {}
        for name in self.build_order.order:
            self.compiled[name] = compile_module(
                self.modules[name],
                port_maps,
                strict_undriven=self.config.strict_undriven,
            )

        circuit = assemble_toplevel(
            self.compiled,
            self.build_order.top,
            interactive_io=self.config.interactive_io,
        )
        if self.build_order.ambiguous:
            note = Diagnostic(
                kind=DiagnosticKind.AMBIGUOUS_TOP,
                module=self.build_order.top,
                message=f"top level chosen among roots {', '.join(self.build_order.roots)}",
            )
            circuit = _with_diagnostic(circuit, note)
        if self.config.layout:
            circuit = layout_circuit(circuit)

        self.circuit = circuit
        return circuit

    def get_circuit(self) -> CompiledModuleGraph:
        if self.circuit is None:
            raise RuntimeError("No circuit available. Run compile() first.")
        return self.circuit

    def get_module(self, name: str) -> CompiledModuleGraph:
        circuit = self.get_circuit()
        if name == circuit.name:
            return circuit
        return circuit.subcircuits[name]

    def diagnostics(self) -> List[Diagnostic]:
        return self.get_circuit().all_diagnostics()

    def write_html(self, path: str | Path, script_src: str = "main.js") -> None:
        write_html(self.get_circuit(), path, script_src)

    def save_cache(self, path: str | Path, indent: Optional[int] = None) -> None:
        snapshot = CircuitSnapshot(
            version=CircuitVersion(source_hash=self.source_hash, tool_version=__version__),
            circuit=self.get_circuit(),
        )
        save_snapshot(snapshot, path, indent=indent)

    @classmethod
    def load_from_cache(cls, path: str | Path, config: Optional[CompileConfig] = None) -> "CircuitPipeline":
        snapshot = load_snapshot(path)
        pipeline = cls(config)
        pipeline.circuit = snapshot.circuit
        pipeline.source_hash = snapshot.version.source_hash
        return pipeline


def _with_diagnostic(graph: CompiledModuleGraph, diag: Diagnostic) -> CompiledModuleGraph:
    return dataclasses.replace(graph, diagnostics=graph.diagnostics + (diag,))


def compile_netlist(yosys: dict, config: Optional[CompileConfig] = None) -> CompiledModuleGraph:
    pipeline = CircuitPipeline(config)
    pipeline.load_yosys(yosys)
    return pipeline.compile()
