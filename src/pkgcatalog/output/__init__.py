"""Artifact serialization and writing."""

from .writer import ManifestEntry, WriteMode, render_manifest, serialize_json, write_json, write_text

__all__ = ["ManifestEntry", "WriteMode", "render_manifest", "serialize_json", "write_json", "write_text"]
