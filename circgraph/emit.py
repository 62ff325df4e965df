from __future__ import annotations

import html
import json
import logging
from pathlib import Path

from .cache.snapshot import serialize_circuit
from .core.graph import CompiledModuleGraph

logger = logging.getLogger(__name__)

HEADER = """<!doctype html>
<html>
  <head>
    <meta http-equiv="Content-Type" content="text/html;charset=UTF-8" />
    <script type="text/javascript" src="{script_src}"></script>
    <title>{title}</title>
  </head>
  <body>"""

BODY = """<div id="paper"></div><script>const circuit = new digitaljs.Circuit(
{circuit}
);const paper = circuit.displayOn($('#paper'));</script></body></html>"""


def circuit_json(graph: CompiledModuleGraph, indent: int = 2) -> str:
    # "</" inside an inline script would end it early
    return json.dumps(serialize_circuit(graph), indent=indent).replace("</", "<\\/")


def render_html(graph: CompiledModuleGraph, script_src: str = "main.js") -> str:
    return "\n".join(
        [
            HEADER.format(script_src=script_src, title=html.escape(graph.name)),
            BODY.format(circuit=circuit_json(graph)),
        ]
    )


def write_html(graph: CompiledModuleGraph, path: str | Path, script_src: str = "main.js") -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_html(graph, script_src), encoding="utf-8")
    logger.info(f"Wrote circuit page to {path}")
