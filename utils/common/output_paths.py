"""
Output locations for rendered documents.

Each output format gets its own sub-directory of the output root, and each
top-level type is written to a file named after its display name.
"""

import re
from pathlib import Path
from typing import Union

from models.type_doc import TypeDoc

_UNSAFE_CHARS_RE = re.compile(r'[<>:"/\\|?*\s]')


def safe_file_name(name: str) -> str:
    """Replace characters that are invalid in file names with ``_``."""
    return _UNSAFE_CHARS_RE.sub("_", name) or "_"


def format_dir(out_root: Union[str, Path], fmt: str) -> Path:
    """``<out_root>/<fmt>`` with the format name lower-cased."""
    return Path(out_root) / fmt.lower()


def type_output_path(out_root: Union[str, Path], type_doc: TypeDoc, ext: str) -> Path:
    """Path of the *ext* file rendered for *type_doc* under *out_root*."""
    ext = ext.lstrip(".").lower()
    return format_dir(out_root, ext) / f"{safe_file_name(type_doc.display_name)}.{ext}"
