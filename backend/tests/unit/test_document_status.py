"""Unit tests for DocumentStatus and role capabilities"""

from docflow.auth.roles import Capability, UserRole, has_capability
from docflow.domain.documents import (
    DocumentStatus,
    EDITABLE_STATUSES,
    INITIAL_STATUSES,
    is_terminal,
)


class TestDocumentStatus:
    """Test DocumentStatus enum values and groupings"""

    def test_all_statuses_defined(self):
        assert {s.value for s in DocumentStatus} == {
            "DRAFTED", "SUBMITTED", "PENDING", "APPROVED", "REJECTED",
        }

    def test_status_is_string_enum(self):
        assert DocumentStatus.PENDING == "PENDING"
        assert DocumentStatus("SUBMITTED") is DocumentStatus.SUBMITTED

    def test_initial_statuses(self):
        assert INITIAL_STATUSES == {DocumentStatus.DRAFTED, DocumentStatus.SUBMITTED}

    def test_terminal_statuses(self):
        assert is_terminal(DocumentStatus.APPROVED)
        assert is_terminal(DocumentStatus.REJECTED)
        assert not is_terminal(DocumentStatus.PENDING)
        assert not is_terminal(DocumentStatus.DRAFTED)

    def test_pending_is_not_editable(self):
        assert DocumentStatus.PENDING not in EDITABLE_STATUSES


class TestCapabilities:
    """Test the role capability matrix"""

    def test_only_admin_manages_documents(self):
        for capability in Capability:
            assert has_capability(UserRole.ADMIN, capability)
            assert not has_capability(UserRole.MANAGER, capability)
            assert not has_capability(UserRole.STANDARDIZATION, capability)
