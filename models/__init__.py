"""
models - Documentation-entry tree consumed by the renderers.
"""

from models.type_doc import (
    MEMBER_GROUPS,
    MemberDoc,
    ModelLoadError,
    TypeDoc,
    load_type_docs,
)

__all__ = [
    "MEMBER_GROUPS",
    "MemberDoc",
    "ModelLoadError",
    "TypeDoc",
    "load_type_docs",
]
