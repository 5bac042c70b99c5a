"""Anchor-driven patch engine for the agent CLI bundle."""

from .errors import AlreadyPatched, AnchorNotFound, ExtractionFailed, NotRecognized, PatchEngineError
from .extract import IdentifierBundle, extract_identifiers
from .generate import GeneratedFragments, render_fragments
from .guard import is_already_patched, is_recognized
from .pipeline import patch_source
from .report import EditFailure, PatchReport, PatchStatus

__all__ = [
    "AlreadyPatched",
    "AnchorNotFound",
    "EditFailure",
    "ExtractionFailed",
    "GeneratedFragments",
    "IdentifierBundle",
    "NotRecognized",
    "PatchEngineError",
    "PatchReport",
    "PatchStatus",
    "extract_identifiers",
    "is_already_patched",
    "is_recognized",
    "patch_source",
    "render_fragments",
]
