from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class YosysConfig:
    src_dir: str
    out_json: str
    top_module: Optional[str] = None
    yosys_bin: str = "yosys"


@dataclass
class CompileConfig:
    top_module: Optional[str] = None
    interactive_io: bool = True
    layout: bool = False
    strict_undriven: bool = False
