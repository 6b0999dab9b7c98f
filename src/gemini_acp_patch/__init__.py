"""
Gemini CLI ACP Patch - fixes ACP mode hanging under piped stdio.

This package locates an installed @google/gemini-cli and inserts an early exit
for ACP mode into its entry script, keeping a backup of the original file.
"""

from gemini_acp_patch.acp_patch_applier import AcpPatchApplier, insert_patch, is_patched
from gemini_acp_patch.acp_patch_config import AcpPatchConfig
from gemini_acp_patch.acp_patch_exceptions import (
    AcpPatchAnchorError,
    AcpPatchBackupError,
    AcpPatchConfigError,
    AcpPatchError,
)
from gemini_acp_patch.acp_patch_locator import AcpPatchLocator
from gemini_acp_patch.acp_patch_types import AcpPatchResult, AcpPatchStatus

__version__ = "1.0.0"

__all__ = [
    # Exceptions
    'AcpPatchError',
    'AcpPatchAnchorError',
    'AcpPatchBackupError',
    'AcpPatchConfigError',
    # Types
    'AcpPatchStatus',
    'AcpPatchResult',
    # Core
    'AcpPatchConfig',
    'AcpPatchLocator',
    'AcpPatchApplier',
    'insert_patch',
    'is_patched',
]
