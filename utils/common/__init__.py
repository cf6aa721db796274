"""
utils.common - Shared helpers for the xyDoc renderers.

Modules:
    output_paths - Per-format output directories and per-type file names
"""

from utils.common.output_paths import format_dir, safe_file_name, type_output_path

__all__ = [
    "format_dir",
    "safe_file_name",
    "type_output_path",
]
