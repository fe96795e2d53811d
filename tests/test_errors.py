"""Tests for chirp_static.errors — exception hierarchy and error messages."""

import pytest

from chirp_static.errors import (
    ConfigurationError,
    Forbidden,
    HTTPError,
    MethodNotAllowed,
    NotFound,
    PreconditionFailed,
    SendError,
    StaticError,
)


class TestHierarchy:
    def test_http_error_is_static_error(self) -> None:
        assert issubclass(HTTPError, StaticError)

    def test_configuration_error_is_static_error(self) -> None:
        assert issubclass(ConfigurationError, StaticError)

    @pytest.mark.parametrize("cls", [NotFound, Forbidden, PreconditionFailed, SendError])
    def test_subclasses_are_http_errors(self, cls) -> None:
        assert issubclass(cls, HTTPError)


class TestHTTPError:
    def test_status_and_detail(self) -> None:
        err = HTTPError(status=400, detail="Bad path")
        assert err.status == 400
        assert err.detail == "Bad path"

    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad path")) == "400: Bad path"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    def test_frozen(self) -> None:
        err = HTTPError(status=400)
        with pytest.raises(AttributeError):
            err.status = 500  # type: ignore[misc]

    def test_default_empty_headers(self) -> None:
        assert HTTPError(status=400).headers == ()

    def test_is_client_error(self) -> None:
        assert HTTPError(status=404).is_client_error
        assert not HTTPError(status=500).is_client_error


class TestSubclasses:
    def test_not_found(self) -> None:
        err = NotFound()
        assert err.status == 404
        assert err.detail == "Not Found"

    def test_forbidden(self) -> None:
        assert Forbidden("nope").status == 403

    def test_precondition_failed(self) -> None:
        assert PreconditionFailed().status == 412

    def test_send_error_status(self) -> None:
        assert SendError().status == 500
        assert SendError(400, "NUL byte").status == 400

    def test_cause_can_be_chained(self) -> None:
        cause = OSError(5, "Input/output error")
        with pytest.raises(SendError) as excinfo:
            raise SendError(500, "read failed") from cause
        assert excinfo.value.__cause__ is cause

    def test_cause_can_be_set_on_frozen_error(self) -> None:
        err = NotFound()
        cause = FileNotFoundError(2, "No such file or directory")
        object.__setattr__(err, "__cause__", cause)
        assert err.__cause__ is cause
        assert err.status == 404

    def test_method_not_allowed_allow_header(self) -> None:
        err = MethodNotAllowed(frozenset({"POST", "GET"}))
        assert err.status == 405
        assert err.headers == (("Allow", "GET, POST"),)
        assert "GET, POST" in err.detail

    def test_raise_and_catch(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            raise NotFound("gone")
        assert exc_info.value.status == 404
