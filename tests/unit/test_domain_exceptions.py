"""Tests for domain exceptions (error_code, message, details) and their HTTP mapping."""

import pytest

from app.core.exception_handlers import _ERROR_CODE_STATUS, status_for_error_code
from app.domain.exceptions import (
    MalformedEnvelopeException,
    ReplicationServiceException,
    SignatureInvalidException,
    SqlNotConfiguredException,
    UnauthorizedTopicException,
    UnknownMessageTypeException,
)
from app.infrastructure.exceptions import (
    CacheUnavailableError,
    CertificateFetchError,
    EmailDeliveryError,
)


def test_base_exception_default_error_code() -> None:
    """Base ReplicationServiceException uses class name as error_code when not provided."""
    exc = ReplicationServiceException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "ReplicationServiceException"
    assert exc.details == {}
    assert exc.to_dict() == {"error": "ReplicationServiceException", "message": "Something failed"}


def test_base_exception_custom_error_code_and_details() -> None:
    """to_dict includes details only when present."""
    exc = ReplicationServiceException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_malformed_envelope_exception() -> None:
    exc = MalformedEnvelopeException(missing=["Type"])
    assert exc.error_code == "MALFORMED_ENVELOPE"
    assert exc.message == "Invalid SNS message format"
    assert exc.details == {"missing_fields": ["Type"]}


def test_gate_exceptions_carry_context() -> None:
    assert UnauthorizedTopicException("arn:x").details == {"topic_arn": "arn:x"}
    assert SignatureInvalidException("m1").details == {"message_id": "m1"}
    assert UnknownMessageTypeException("Heartbeat").message == "Unknown message type: Heartbeat"


def test_infrastructure_errors_extend_base() -> None:
    """Infrastructure errors are ReplicationServiceExceptions with their own codes."""
    for exc, code in (
        (CertificateFetchError("https://x", "HTTP 404"), "CERTIFICATE_FETCH_ERROR"),
        (CacheUnavailableError("get", "k"), "CACHE_UNAVAILABLE"),
        (EmailDeliveryError("nope", status_code=400), "EMAIL_DELIVERY_ERROR"),
    ):
        assert isinstance(exc, ReplicationServiceException)
        assert exc.error_code == code


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (MalformedEnvelopeException(), 400),
        (UnknownMessageTypeException("X"), 400),
        (UnauthorizedTopicException("arn"), 403),
        (SignatureInvalidException("m"), 403),
        (CacheUnavailableError("get", "k"), 500),
        (SqlNotConfiguredException(), 500),
        (CertificateFetchError("u", "r"), 500),
    ],
)
def test_status_mapping(exc: ReplicationServiceException, status: int) -> None:
    """Rejections map to 4xx; anything SNS should retry maps to 5xx."""
    assert status_for_error_code(exc.error_code) == status


def test_every_mapped_code_is_raised_by_an_exception() -> None:
    """The status table only lists codes that some service exception carries."""
    raised = {
        exc.error_code
        for exc in (
            MalformedEnvelopeException(),
            UnknownMessageTypeException("X"),
            UnauthorizedTopicException("arn"),
            SignatureInvalidException("m"),
            SqlNotConfiguredException(),
            CacheUnavailableError("get", "k"),
            CertificateFetchError("u", "r"),
            EmailDeliveryError("nope"),
        )
    }
    assert set(_ERROR_CODE_STATUS) <= raised
    assert 404 not in _ERROR_CODE_STATUS.values()
