"""Tests for ACP patch types."""

from gemini_acp_patch.acp_patch_types import AcpPatchResult, AcpPatchStatus


class TestAcpPatchResult:
    """Test the result dataclass."""

    def test_defaults(self):
        """Test that optional fields default to None."""
        result = AcpPatchResult(success=True, status=AcpPatchStatus.PATCHED, message="done")

        assert result.backup_path is None
        assert result.error_details is None

    def test_equality(self):
        """Test that results compare by value."""
        first = AcpPatchResult(False, AcpPatchStatus.ANCHOR_MISSING, "missing", error_details={'a': 1})
        second = AcpPatchResult(False, AcpPatchStatus.ANCHOR_MISSING, "missing", error_details={'a': 1})

        assert first == second

    def test_status_values(self):
        """Test that statuses have stable string values."""
        assert {s.value for s in AcpPatchStatus} == {
            'patched', 'already_patched', 'applicable', 'anchor_missing', 'restored', 'no_backup'
        }
