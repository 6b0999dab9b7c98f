"""Insertion of the ACP early-exit block into gemini.js."""

import logging
import os
import shutil

from gemini_acp_patch.acp_patch_constants import (
    ANCHOR_INDENT,
    ANCHOR_MARKER,
    BACKUP_SUFFIX,
    PATCH_CODE,
    PATCH_MARKER,
)
from gemini_acp_patch.acp_patch_exceptions import AcpPatchAnchorError, AcpPatchBackupError
from gemini_acp_patch.acp_patch_types import AcpPatchResult, AcpPatchStatus


def is_patched(content: str) -> bool:
    """Check whether content already carries the ACP patch."""
    return PATCH_MARKER in content


def insert_patch(content: str) -> str:
    """
    Insert the patch block immediately before the first anchor occurrence.

    Args:
        content: Original file content

    Returns:
        Content with the patch block inserted; text from the anchor onward is unchanged

    Raises:
        AcpPatchAnchorError: If the anchor is not present
    """
    anchor_index = content.find(ANCHOR_MARKER)
    if anchor_index == -1:
        raise AcpPatchAnchorError(
            "Could not find insertion point. The file structure may have changed.",
            {
                'anchor': ANCHOR_MARKER,
                'content_length': len(content),
                'suggestion': 'Check that the installed gemini-cli version is supported.'
            }
        )

    return content[:anchor_index] + PATCH_CODE + ANCHOR_INDENT + content[anchor_index:]


def backup_path_for(file_path: str) -> str:
    """Get the backup file path for a target file."""
    return file_path + BACKUP_SUFFIX


class AcpPatchApplier:
    """
    Applies, checks, and restores the ACP patch on a gemini.js file.

    Anticipated conditions (already patched, missing anchor, missing backup) are
    reported through AcpPatchResult.  Filesystem errors propagate to the caller.
    """

    def __init__(self, encoding: str = 'utf-8'):
        """
        Initialize the applier.

        Args:
            encoding: Text encoding of the target file
        """
        self._encoding = encoding
        self._logger = logging.getLogger("AcpPatchApplier")

    def _read(self, file_path: str) -> str:
        with open(file_path, 'r', encoding=self._encoding, newline='') as f:
            return f.read()

    def _write(self, file_path: str, content: str) -> None:
        with open(file_path, 'w', encoding=self._encoding, newline='') as f:
            f.write(content)

    def _require_backup(self, backup_path: str) -> None:
        if not os.path.exists(backup_path):
            raise AcpPatchBackupError(
                f"No backup found at {backup_path}",
                {'backup_path': backup_path}
            )

    def apply(self, file_path: str, dry_run: bool = False) -> AcpPatchResult:
        """
        Apply the patch to a file in place.

        The original content is saved to a backup file the first time the patch
        is applied; an existing backup is never overwritten.

        Args:
            file_path: Path to gemini.js
            dry_run: If True, report what would happen without writing anything

        Returns:
            AcpPatchResult describing the outcome
        """
        self._logger.debug("Reading %s", file_path)
        content = self._read(file_path)

        if is_patched(content):
            self._logger.info("%s is already patched", file_path)
            return AcpPatchResult(
                success=True,
                status=AcpPatchStatus.ALREADY_PATCHED,
                message="File is already patched. Skipping."
            )

        try:
            patched_content = insert_patch(content)

        except AcpPatchAnchorError as e:
            self._logger.info("Anchor not found in %s", file_path)
            return AcpPatchResult(
                success=False,
                status=AcpPatchStatus.ANCHOR_MISSING,
                message=str(e),
                error_details=e.error_details
            )

        backup_path = backup_path_for(file_path)

        if dry_run:
            return AcpPatchResult(
                success=True,
                status=AcpPatchStatus.APPLICABLE,
                message="Dry run: patch can be applied. No changes were made.",
                backup_path=backup_path
            )

        if not os.path.exists(backup_path):
            self._write(backup_path, content)
            self._logger.info("Backup created at %s", backup_path)

        else:
            self._logger.info("Keeping existing backup at %s", backup_path)

        self._write(file_path, patched_content)
        self._logger.info("Patched %s", file_path)

        return AcpPatchResult(
            success=True,
            status=AcpPatchStatus.PATCHED,
            message="Patch applied successfully!",
            backup_path=backup_path
        )

    def check(self, file_path: str) -> AcpPatchResult:
        """
        Report whether a file is patched, without modifying anything.

        Args:
            file_path: Path to gemini.js

        Returns:
            AcpPatchResult that succeeds only when the patch is already present
        """
        content = self._read(file_path)

        if is_patched(content):
            return AcpPatchResult(
                success=True,
                status=AcpPatchStatus.ALREADY_PATCHED,
                message="File is patched."
            )

        if ANCHOR_MARKER not in content:
            return AcpPatchResult(
                success=False,
                status=AcpPatchStatus.ANCHOR_MISSING,
                message="File is not patched and the insertion point could not be found.",
                error_details={'anchor': ANCHOR_MARKER}
            )

        return AcpPatchResult(
            success=False,
            status=AcpPatchStatus.APPLICABLE,
            message="File is not patched. Run without --check to apply the patch."
        )

    def restore(self, file_path: str) -> AcpPatchResult:
        """
        Restore a file from its backup.

        The backup is kept so the original pristine copy survives later patches.

        Args:
            file_path: Path to gemini.js

        Returns:
            AcpPatchResult describing the outcome
        """
        backup_path = backup_path_for(file_path)

        try:
            self._require_backup(backup_path)

        except AcpPatchBackupError as e:
            self._logger.info("Restore requested but no backup exists for %s", file_path)
            return AcpPatchResult(
                success=False,
                status=AcpPatchStatus.NO_BACKUP,
                message=str(e),
                backup_path=backup_path,
                error_details=e.error_details
            )

        shutil.copyfile(backup_path, file_path)
        self._logger.info("Restored %s from %s", file_path, backup_path)

        return AcpPatchResult(
            success=True,
            status=AcpPatchStatus.RESTORED,
            message=f"Restored original file from {backup_path}",
            backup_path=backup_path
        )
