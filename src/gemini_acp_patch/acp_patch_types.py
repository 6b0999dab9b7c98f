"""Shared types for ACP patch operations."""

from dataclasses import dataclass
from enum import Enum


class AcpPatchStatus(Enum):
    """Outcome of an operation against a gemini.js file."""
    PATCHED = "patched"
    ALREADY_PATCHED = "already_patched"
    APPLICABLE = "applicable"
    ANCHOR_MISSING = "anchor_missing"
    RESTORED = "restored"
    NO_BACKUP = "no_backup"


@dataclass
class AcpPatchResult:
    """Result of applying, checking, or restoring the patch."""

    success: bool
    status: AcpPatchStatus
    message: str
    backup_path: str | None = None
    error_details: dict | None = None
