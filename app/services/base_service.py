"""
Shared plumbing for database-backed services.
"""
from typing import Any, Dict, NoReturn

from sqlalchemy.orm import Session

from app.folderdeck_logger import logger


class FolderServiceError(Exception):
    """Raised when a storage call inside a service fails.

    Ownership failures and missing rows are not errors: services report them
    as ``None`` / ``False`` / ``[]`` so callers check results instead.
    """

    def __init__(self, operation: str, context: Dict[str, Any]):
        self.operation = operation
        self.context = context
        super().__init__(f"Database operation '{operation}' failed")


class BaseService:
    def __init__(self, db: Session):
        self.db = db

    def handle_database_error(self, error: Exception, operation: str, context: Dict[str, Any]) -> NoReturn:
        """
        Roll back the session, log the failure and raise a domain error.

        Args:
            error: The exception raised by the storage layer
            operation: Name of the service operation that failed
            context: Identifiers involved in the call, logged for diagnosis
        """
        self.db.rollback()
        logger.error(f"Database error in {operation} {context}: {error}")
        raise FolderServiceError(operation, context) from error
