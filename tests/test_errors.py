"""
Tests for the error hierarchy
"""
import pytest

from smallpop3.utils.errors import (
    AuthenticationError,
    ChannelBusyError,
    ErrorCategory,
    InvalidHostError,
    InvalidMessageIdError,
    NetworkTimeoutError,
    ProtocolError,
    ServerConnectionError,
    SizeError,
    SmallPOP3Error,
    ValidationError,
    format_error_message,
)


class TestErrorCategories:
    """Tests for error categories"""

    @pytest.mark.parametrize("error_class, category", [
        (InvalidHostError, ErrorCategory.VALIDATION),
        (InvalidMessageIdError, ErrorCategory.VALIDATION),
        (ServerConnectionError, ErrorCategory.NETWORK),
        (NetworkTimeoutError, ErrorCategory.NETWORK),
        (ProtocolError, ErrorCategory.PROTOCOL),
        (ChannelBusyError, ErrorCategory.PROTOCOL),
        (AuthenticationError, ErrorCategory.AUTHENTICATION),
        (SizeError, ErrorCategory.SIZE),
    ])
    def test_category(self, error_class, category):
        error = error_class()

        assert error.category is category
        assert isinstance(error, SmallPOP3Error)

    def test_validation_errors_share_base(self):
        assert issubclass(InvalidHostError, ValidationError)

    def test_authentication_is_protocol_error(self):
        """Test callers catching ProtocolError also see rejected logins"""
        assert issubclass(AuthenticationError, ProtocolError)


class TestErrorDetails:
    """Tests for messages, details and to_dict"""

    def test_default_message(self):
        assert SizeError().message == "The size of an e-mail is invalid"

    def test_custom_message_and_details(self):
        error = InvalidHostError("bad host", details={"host": "'x y'"})

        assert str(error) == "bad host"
        assert error.details == {"host": "'x y'"}

    def test_protocol_error_keeps_response(self):
        error = ProtocolError("rejected", response="-ERR nope")

        assert error.response == "-ERR nope"
        assert error.details["response"] == "-ERR nope"

    def test_to_dict(self):
        result = NetworkTimeoutError("slow", details={"timeout": 1.5}).to_dict()

        assert result == {
            "error_type": "NetworkTimeoutError",
            "category": "network",
            "message": "slow",
            "details": {"timeout": 1.5},
        }


class TestFormatErrorMessage:
    """Tests for format_error_message"""

    def test_known_error(self):
        assert format_error_message(SizeError("too big")) == "too big"

    def test_unknown_error(self):
        assert "unexpected" in format_error_message(RuntimeError("boom"))
