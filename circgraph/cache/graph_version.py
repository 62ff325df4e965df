from dataclasses import dataclass


@dataclass
class CircuitVersion:
    source_hash: str
    tool_version: str = ""
