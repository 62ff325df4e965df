from __future__ import annotations

import glob
import json
import logging
import os
import subprocess
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.errors import NetlistFormatError, PortDirectionError
from ..core.ir import CONST_LOW, CellIR, ModuleIR, NetKey, PortDirection, PortIR
from ..utils.config import YosysConfig

logger = logging.getLogger(__name__)

UNDEFINED_BIT_SYMBOLS = frozenset({"x", "z"})


def collect_hdl_files(src_dir: str) -> List[str]:
    verilog_files = glob.glob(os.path.join(src_dir, "*.v"))
    sv_files = glob.glob(os.path.join(src_dir, "*.sv"))
    return sorted(verilog_files + sv_files)


def build_yosys_script(files: List[str], top_module: Optional[str], out_json: str) -> str:
    hierarchy = f"hierarchy -check -top {top_module};" if top_module else "hierarchy -check;"
    return "\n".join(
        [
            f"read_verilog -sv {' '.join(files)};",
            hierarchy,
            "proc;",
            "opt;",
            f"write_json {out_json}",
        ]
    )


def run_yosys(files: List[str], config: YosysConfig) -> None:
    if not files:
        raise RuntimeError("No HDL files found.")

    script = build_yosys_script(files, config.top_module, config.out_json)
    logger.info(f"Running {config.yosys_bin} on {len(files)} file(s)")
    subprocess.run([config.yosys_bin, "-p", script], check=True)


def load_yosys_json(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def parse_yosys(config: YosysConfig) -> dict:
    files = collect_hdl_files(config.src_dir)
    run_yosys(files, config)
    return load_yosys_json(config.out_json)


def normalize_bit(value) -> Tuple[int, bool]:
    """
    Convert one Yosys bit reference to an integer BitId.

    Yosys writes constant bits as the strings "0"/"1" (and "x"/"z" for
    undefined or floating bits) while real wires are plain integers.

    Returns:
        (bit, undefined) where undefined marks an x/z bit read as logic-0.
    """
    if isinstance(value, bool):
        raise NetlistFormatError(f"Invalid bit reference: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise NetlistFormatError(f"Invalid bit reference: {value!r}")
        return value, False
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text), False
        if text.lower() in UNDEFINED_BIT_SYMBOLS:
            return CONST_LOW, True
    raise NetlistFormatError(f"Invalid bit reference: {value!r}")


def normalize_bits(values: Sequence) -> Tuple[NetKey, bool]:
    bits = []
    undefined = False
    for value in values:
        bit, undef = normalize_bit(value)
        bits.append(bit)
        undefined = undefined or undef
    return tuple(bits), undefined


def parse_direction(module: str, owner: str, port: str, value) -> PortDirection:
    try:
        return PortDirection(value)
    except ValueError:
        raise PortDirectionError(module, owner, port, value) from None


def build_module(name: str, mod: dict) -> ModuleIR:
    ports: Dict[str, PortIR] = {}
    cells: Dict[str, CellIR] = {}
    undefined_refs: List[str] = []

    for pname, port in mod.get("ports", {}).items():
        direction = parse_direction(name, name, pname, port.get("direction"))
        bits, undefined = normalize_bits(port.get("bits", []))
        if undefined:
            undefined_refs.append(f"{name}.{pname}")
        ports[pname] = PortIR(name=pname, direction=direction, bits=bits)

    for cname, c in mod.get("cells", {}).items():
        if "type" not in c:
            raise NetlistFormatError(f"Cell {cname} in module {name} has no type")
        raw_conns = c.get("connections", {})
        port_dirs: Dict[str, PortDirection] = {}
        connections: Dict[str, NetKey] = {}
        for pname, pdir in c.get("port_directions", {}).items():
            port_dirs[pname] = parse_direction(name, cname, pname, pdir)
            if pname not in raw_conns:
                raise NetlistFormatError(
                    f"Port {cname}.{pname} in module {name} has a direction but no connection"
                )
            bits, undefined = normalize_bits(raw_conns[pname])
            if undefined:
                undefined_refs.append(f"{cname}.{pname}")
            connections[pname] = bits

        dropped = [p for p in raw_conns if p not in port_dirs]
        if dropped:
            logger.debug(f"Cell {cname} in module {name}: ignoring undirected ports {dropped}")

        cells[cname] = CellIR(
            name=cname,
            type=c["type"],
            module=name,
            port_dirs=port_dirs,
            connections=connections,
            src=c.get("attributes", {}).get("src") or c.get("src"),
        )

    for ref in undefined_refs:
        logger.debug(f"Undefined (x/z) bits in {ref} of module {name} read as logic-0")

    return ModuleIR(name=name, ports=ports, cells=cells, undefined_refs=tuple(undefined_refs))


def build_modules(yosys: dict) -> Dict[str, ModuleIR]:
    modules = yosys.get("modules")
    if not isinstance(modules, dict):
        raise NetlistFormatError("Netlist document has no 'modules' mapping")
    return {name: build_module(name, mod) for name, mod in modules.items()}
