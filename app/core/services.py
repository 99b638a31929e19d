"""
Base service layer patterns for business logic encapsulation.

Services encapsulate business logic separate from views and models.
Views handle HTTP concerns, models handle data, services handle logic.
Expected failures are raised as core.exceptions subclasses; the API layer
renders them.

Usage:
    from core.services import BaseService

    class ThreadService(BaseService):
        @classmethod
        def hide(cls, thread, user):
            with cls.storage_operation("hide thread"), cls.atomic():
                ...
            cls.get_logger().info(f"Thread {thread.id} hidden by {user.id}")
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import DatabaseError, IntegrityError, transaction

from core.exceptions import StorageError

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides:
    - Logging setup per service
    - Database transaction management
    - Translation of database failures into StorageError

    Design Notes:
        - Use @classmethod (no instance state)
        - Services should be stateless
        - Raise core.exceptions subclasses for expected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Thin wrapper around transaction.atomic() that makes transaction
        boundaries explicit in service code.
        """
        with transaction.atomic():
            yield

    @classmethod
    @contextmanager
    def storage_operation(cls, context: str) -> Generator[None, None, None]:
        """
        Convert database failures raised inside the block into StorageError.

        IntegrityError is left alone: constraint violations carry meaning
        for the caller (e.g. a lost creation race) and are handled there.

        Args:
            context: Short description of the operation, used in the log line
        """
        try:
            yield
        except IntegrityError:
            raise
        except DatabaseError as exc:
            cls.get_logger().exception(f"Storage failure during {context}: {exc}")
            raise StorageError(
                "A storage error occurred. Please try again.",
                details={"operation": context},
            ) from exc
