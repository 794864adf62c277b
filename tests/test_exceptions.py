"""
Test the exception hierarchy.
"""

from mcp_roster.core import exceptions
from mcp_roster.core.exceptions import (
    ConfigError,
    CredentialError,
    DuplicateServerError,
    RosterError,
    ServerError,
    ValidationError,
)


class TestExceptions:
    """Test RosterError and its subclasses."""

    def test_str_includes_error_code(self):
        assert str(RosterError("bad", error_code="X")) == "[X] bad"
        assert str(RosterError("bad")) == "bad"

    def test_to_dict(self):
        error = ConfigError("unreadable", error_code="STORE_READ_FAILED", details={"path": "/x"})

        assert error.to_dict() == {
            "error": "ConfigError",
            "message": "unreadable",
            "error_code": "STORE_READ_FAILED",
            "details": {"path": "/x"},
        }

    def test_duplicate_server_error(self):
        error = DuplicateServerError("taken", server_ids=["a"], error_code="DUPLICATE_ID")

        assert isinstance(error, ServerError)
        assert error.server_ids == ["a"]
        assert error.details == {}

    def test_hierarchy_has_only_raised_errors(self):
        defined = {
            name for name, obj in vars(exceptions).items()
            if isinstance(obj, type) and issubclass(obj, RosterError)
        }

        assert defined == {
            "RosterError",
            "ConfigError",
            "ServerError",
            "ValidationError",
            "CredentialError",
            "DuplicateServerError",
        }
        assert all(
            issubclass(cls, RosterError)
            for cls in (ConfigError, ServerError, ValidationError, CredentialError)
        )
