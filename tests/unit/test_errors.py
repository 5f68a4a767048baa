"""Tests for svc_common.errors."""

from src.svc_common.errors import AppError, CacheError, StoreError, ValidationError


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError("Internal error")
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_custom_http_status(self) -> None:
        err = AppError("Conflict", http_status=409)
        assert err.http_status == 409

    def test_is_exception(self) -> None:
        assert isinstance(AppError("test"), Exception)


class TestSpecificErrors:
    def test_validation_error_is_client_error(self) -> None:
        err = ValidationError("users must be a non-empty list")
        assert err.http_status == 400
        assert err.message == "users must be a non-empty list"

    def test_store_error_hides_detail_from_clients(self) -> None:
        err = StoreError("Batch insert of 2 records failed")
        assert err.http_status == 500
        assert err.message == "Internal Server Error"
        assert str(err) == "Batch insert of 2 records failed"

    def test_store_error_keeps_cause(self) -> None:
        cause = RuntimeError("connection reset")
        try:
            raise StoreError() from cause
        except StoreError as err:
            assert err.__cause__ is cause

    def test_cache_error_is_not_an_app_error(self) -> None:
        assert not issubclass(CacheError, AppError)
