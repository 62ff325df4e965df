#!/usr/bin/env python3
"""
circgraph command line

Compiles a Yosys JSON netlist (or runs yosys on a directory of HDL sources
first) into a DigitalJS circuit and writes it as an HTML page and/or JSON.
"""

import argparse
import json
import logging
import sys

from .cache import serialize_circuit
from .core.errors import NetlistError
from .debug import plot_circuit, print_circuit_summary
from .pipeline import CircuitPipeline
from .utils.config import CompileConfig, YosysConfig

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="circgraph - Yosys netlist to DigitalJS circuit")

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--netlist", help="Yosys JSON netlist (write_json output)")
    source.add_argument("--src-dir", help="Directory of .v/.sv files to run yosys on")

    parser.add_argument("--top", help="Top-level module (default: inferred from hierarchy)")
    parser.add_argument("--yosys-json", default="output.json", help="Where yosys writes its JSON (with --src-dir)")
    parser.add_argument("--yosys-bin", default="yosys", help="Yosys executable")
    parser.add_argument("--html", help="Write an HTML page embedding the circuit")
    parser.add_argument("--script-src", default="main.js", help="DigitalJS bundle referenced by the page")
    parser.add_argument("--json", dest="json_out", help="Write the serialized circuit as JSON ('-' for stdout)")
    parser.add_argument("--cache", help="Save a circuit snapshot")
    parser.add_argument("--layout", action="store_true", help="Annotate devices with layered positions")
    parser.add_argument("--no-interactive-io", action="store_false", dest="interactive_io",
                        help="Keep plain $input/$output terminals on the top level")
    parser.add_argument("--strict", action="store_true", help="Fail on undriven nets")
    parser.add_argument("--summary", action="store_true", help="Print a circuit summary")
    parser.add_argument("--plot", action="store_true", help="Plot the top-level circuit")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    level = logging.WARNING if args.verbose == 0 else logging.INFO if args.verbose == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s")

    config = CompileConfig(
        top_module=args.top,
        interactive_io=args.interactive_io,
        layout=args.layout,
        strict_undriven=args.strict,
    )

    try:
        pipeline = CircuitPipeline(config)
        if args.netlist:
            pipeline.load_netlist(args.netlist)
        else:
            pipeline.run_yosys(
                YosysConfig(
                    src_dir=args.src_dir,
                    out_json=args.yosys_json,
                    top_module=args.top,
                    yosys_bin=args.yosys_bin,
                )
            )
        circuit = pipeline.compile()
    except NetlistError as e:
        logger.error(f"Compilation failed: {e}")
        return 1
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read netlist: {e}")
        return 1

    if args.html:
        pipeline.write_html(args.html, args.script_src)
    if args.json_out:
        text = json.dumps(serialize_circuit(circuit), indent=2)
        if args.json_out == "-":
            print(text)
        else:
            with open(args.json_out, "w", encoding="utf-8") as f:
                f.write(text)
    if args.cache:
        pipeline.save_cache(args.cache, indent=2)
    if args.summary:
        print_circuit_summary(circuit)
    if args.plot:
        plot_circuit(circuit)

    diagnostics = pipeline.diagnostics()
    if diagnostics:
        logger.info(f"Finished with {len(diagnostics)} diagnostic(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
