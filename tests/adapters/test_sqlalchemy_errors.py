"""Tests for database error translation helpers."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError

from storefront.adapters.sqlalchemy_errors import parse_uuid, translate_db_errors
from storefront.domain.errors import ConflictError, RepositoryUnavailableError, ValidationError


@pytest.mark.parametrize(
    "error",
    [
        OperationalError("SELECT 1", {}, Exception("connection refused")),
        InterfaceError("SELECT 1", {}, Exception("connection closed")),
    ],
)
def test_connection_failures_become_repository_unavailable(error: Exception) -> None:
    with pytest.raises(RepositoryUnavailableError) as exc_info:
        with translate_db_errors("orders.search"):
            raise error

    assert exc_info.value.error_code == "REPOSITORY_UNAVAILABLE"
    assert exc_info.value.context["operation"] == "orders.search"
    assert exc_info.value.__cause__ is error


def test_integrity_errors_become_conflicts() -> None:
    with pytest.raises(ConflictError):
        with translate_db_errors("financing_plans.create"):
            raise IntegrityError("INSERT", {}, Exception("duplicate key"))


def test_data_errors_become_validation_errors() -> None:
    with pytest.raises(ValidationError) as exc_info:
        with translate_db_errors("financing_plans.create"):
            raise DataError("INSERT", {}, Exception("numeric field overflow"))

    assert exc_info.value.error_code == "VALIDATION_ERROR"
    assert exc_info.value.context["operation"] == "financing_plans.create"


def test_other_errors_pass_through() -> None:
    with pytest.raises(KeyError):
        with translate_db_errors("orders.create"):
            raise KeyError("boom")


def test_parse_uuid() -> None:
    value = "550e8400-e29b-41d4-a716-446655440000"

    assert parse_uuid(value) == uuid.UUID(value)
    assert parse_uuid("not-a-uuid") is None
    assert parse_uuid("") is None
