"""
circgraph web server

Flask app exposing a compiled circuit: the DigitalJS page at / and the
serialized circuit, module list and diagnostics under /api.
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import asdict
from typing import Any, Dict

from flask import Flask, Response, jsonify
from flask_cors import CORS

from .cache import serialize_circuit
from .core.graph import CompiledModuleGraph, Diagnostic
from .emit import render_html
from .pipeline import CircuitPipeline
from .utils.config import CompileConfig

logger = logging.getLogger(__name__)


def diagnostic_to_dict(diag: Diagnostic) -> Dict[str, Any]:
    data = asdict(diag)
    data["kind"] = diag.kind.value
    data["net"] = list(diag.net) if diag.net is not None else None
    return data


def create_app(circuit: CompiledModuleGraph, script_src: str = "main.js") -> Flask:
    app = Flask(__name__)
    CORS(app)

    @app.route("/")
    def index():
        return Response(render_html(circuit, script_src), mimetype="text/html")

    @app.route("/api/circuit")
    def get_circuit():
        return jsonify(serialize_circuit(circuit))

    @app.route("/api/modules")
    def get_modules():
        return jsonify({"top": circuit.name, "modules": [circuit.name, *circuit.subcircuits]})

    @app.route("/api/modules/<name>")
    def get_module(name: str):
        if name == circuit.name:
            graph = circuit
        elif name in circuit.subcircuits:
            graph = circuit.subcircuits[name]
        else:
            return jsonify({"error": f"Unknown module: {name}"}), 404
        data = serialize_circuit(graph)
        data.pop("subcircuits", None)
        return jsonify(data)

    @app.route("/api/diagnostics")
    def get_diagnostics():
        return jsonify([diagnostic_to_dict(d) for d in circuit.all_diagnostics()])

    return app


def run_server(netlist: str, config: CompileConfig, host: str = "127.0.0.1", port: int = 5000, debug: bool = False) -> None:
    pipeline = CircuitPipeline(config)
    pipeline.load_netlist(netlist)
    circuit = pipeline.compile()
    app = create_app(circuit)
    logger.info(f"Serving {circuit.name} on http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Serve a compiled circuit over HTTP")
    parser.add_argument("netlist", help="Yosys JSON netlist")
    parser.add_argument("--top", help="Top-level module")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--layout", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    run_server(args.netlist, CompileConfig(top_module=args.top, layout=args.layout), args.host, args.port)


if __name__ == "__main__":
    main()
