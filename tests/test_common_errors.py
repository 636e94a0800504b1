from webservice.common.errors import AppError, ErrorKind, InvalidURLError, ObserverError, Severity


def test_app_error_includes_metadata_in_str():
    err = AppError("boom", Severity.ABORT, ErrorKind.HTTP)
    message = str(err)
    assert "ABORT" in message and "HTTP" in message
    assert err.severity is Severity.ABORT
    assert err.kind is ErrorKind.HTTP


def test_invalid_url_error_is_fatal():
    err = InvalidURLError("bad path")
    assert str(err) == "[ABORT/URL] bad path"


def test_observer_error_keeps_hook_and_cause():
    cause = ValueError("nope")
    err = ObserverError("request_sent", cause)
    assert err.hook == "request_sent"
    assert err.original_exception is cause
    assert err.kind is ErrorKind.OBSERVER
    assert "request_sent" in str(err)
