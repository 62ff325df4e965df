from .config import CompileConfig, YosysConfig
from .utils import compute_file_hash, parse_src, stable_hash

__all__ = [
    "CompileConfig",
    "YosysConfig",
    "compute_file_hash",
    "parse_src",
    "stable_hash",
]
