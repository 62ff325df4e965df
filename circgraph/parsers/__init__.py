"""Netlist ingestion."""
from .yosys_parser import build_modules, load_yosys_json, parse_yosys

__all__ = ["build_modules", "load_yosys_json", "parse_yosys"]
