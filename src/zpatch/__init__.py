"""Retrofit Zellij pane support into the agent CLI bundle."""

from .engine import PatchReport, PatchStatus, patch_source

__all__ = ["PatchReport", "PatchStatus", "patch_source"]
