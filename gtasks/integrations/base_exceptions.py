"""
Base Integration Exceptions

Exception hierarchy for the integration modules.

Request-level failures are never raised: the Tasks client returns a
``Failure`` result instead. These exceptions travel between collaborators
(the token provider signals a rejected refresh with
``AuthenticationException``) and out of diagnostic entry points such as
``TasksClient.self_test``.

Usage:
    from gtasks.integrations.base_exceptions import (
        IntegrationServiceException,
        AuthenticationException,
        ConfigurationException,
        SelfTestFailedException,
        wrap_external_exception,
    )
"""
from typing import Optional, Dict, Any, Type
import traceback


def wrap_external_exception(
    exc: Exception,
    service_name: str,
    operation: str,
    details: Optional[Dict[str, Any]] = None,
    exception_class: Optional[Type['IntegrationServiceException']] = None
) -> 'IntegrationServiceException':
    """
    Wrap an external exception into an IntegrationServiceException with context.

    Args:
        exc: The original exception to wrap
        service_name: Name of the service where error occurred (e.g., "GoogleTasks")
        operation: The operation that failed (e.g., "refresh_token")
        details: Optional additional details
        exception_class: Subclass to instantiate (default: IntegrationServiceException)

    Returns:
        IntegrationServiceException (or the requested subclass) with full context
    """
    error_details = dict(details or {})
    error_details.update({
        'operation': operation,
        'original_error': str(exc),
        'error_type': type(exc).__name__,
        'traceback': traceback.format_exc()
    })

    cls = exception_class or IntegrationServiceException
    return cls(
        message=f"{service_name} operation '{operation}' failed: {str(exc)}",
        service_name=service_name,
        details=error_details,
        cause=exc
    )


class IntegrationServiceException(Exception):
    """
    Base exception for all integration service operations.
    """

    def __init__(
        self,
        message: str,
        service_name: str = "Integration",
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        self.message = message
        self.service_name = service_name
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(service={self.service_name}, message={self.message})"


class AuthenticationException(IntegrationServiceException):
    """Exception raised for authentication/authorization failures."""
    pass


class ConfigurationException(IntegrationServiceException):
    """Exception raised for configuration issues (missing client id, etc.)."""
    pass


class OperationFailedException(IntegrationServiceException):
    """Exception raised when an operation fails (generic failure)."""
    pass


class SelfTestFailedException(OperationFailedException):
    """Raised by self-checks when the live verification call does not succeed."""
    pass
