"""Narrative compilation and content attachment."""

from .attach import AttachResult, attach_content, pick_content_shape, read_attach_inputs
from .compiler import ContentEntry, Heading, NarrativeCompiler, compile_content_map

__all__ = [
    "AttachResult",
    "ContentEntry",
    "Heading",
    "NarrativeCompiler",
    "attach_content",
    "compile_content_map",
    "pick_content_shape",
    "read_attach_inputs",
]
