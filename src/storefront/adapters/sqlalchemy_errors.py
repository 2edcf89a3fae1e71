"""Translate SQLAlchemy failures into domain errors at the adapter boundary."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator
from uuid import UUID

from sqlalchemy.exc import DataError, IntegrityError, InterfaceError, OperationalError

from storefront.domain.errors import ConflictError, RepositoryUnavailableError, ValidationError

logger = logging.getLogger(__name__)


@contextmanager
def translate_db_errors(operation: str) -> Iterator[None]:
    """
    Wrap a repository operation.

    - Connection failures → RepositoryUnavailableError
    - Constraint violations → ConflictError
    - Values the columns cannot hold → ValidationError
    """
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        logger.error(
            "Database unavailable",
            extra={"operation": operation, "error_type": type(exc).__name__},
        )
        raise RepositoryUnavailableError(
            "The data store is temporarily unavailable", operation=operation
        ) from exc
    except IntegrityError as exc:
        raise ConflictError(
            "The change conflicts with existing data", operation=operation
        ) from exc
    except DataError as exc:
        raise ValidationError(
            "A value exceeds what the data store can hold", operation=operation
        ) from exc


def parse_uuid(value: str) -> UUID | None:
    """Return None for strings that are not UUIDs (they cannot match any row)."""
    try:
        return UUID(value)
    except ValueError:
        return None
