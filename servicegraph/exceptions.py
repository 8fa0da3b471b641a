"""
ServiceGraph Exceptions

Custom exception hierarchy for the ServiceGraph container
"""

from typing import List, Optional


class ServiceGraphError(Exception):
    """
    Base exception for all ServiceGraph errors.

    All ServiceGraph-specific exceptions inherit from this class.
    You can catch this to handle any container error generically.

    Example:
        >>> try:
        ...     mailer = container.get('mailer')
        ... except ServiceGraphError as e:
        ...     print(f"DI error: {e}")
    """

    pass


class ServiceNotFoundError(ServiceGraphError):
    """
    Raised when a requested service name is not registered.

    Common causes:
        - Typo in the service name or in an ``@reference`` argument
        - Configuration file containing the service not loaded yet
        - Asking for the definition of an alias that was never bound

    Solution:
        Register the service before requesting it, or mark the reference
        as optional with a trailing ``?``::

            container.register('mailer', {
                'class': 'app.Mailer',
                'arguments': ['@logger?'],
            })
    """

    pass


class PrivateServiceError(ServiceGraphError):
    """
    Raised when a private service is requested directly.

    Private services can only be injected into other services,
    never fetched by an outside caller.

    Solution:
        Reference the service from another definition instead::

            container.register('connection', {'class': 'app.Connection', 'private': True})
            container.register('repository', {
                'class': 'app.Repository',
                'arguments': ['@connection'],
            })
            container.get('repository')  # OK
            container.get('connection')  # PrivateServiceError
    """

    pass


class CircularReferenceError(ServiceGraphError):
    """
    Raised when a circular reference is detected during resolution.

    This error occurs when service A depends on service B, and service B
    (directly or indirectly) depends on service A again. It is never
    wrapped into another error, so the caller always sees the true cycle.

    Attributes:
        chain: Names of all services that were being loaded when the
            cycle was detected, in the order they started loading
        referenced: The name whose second request closed the cycle

    Solution:
        1. Refactor to remove the circular dependency
        2. For singletons, break the cycle with setter injection through
           the ``call`` option instead of constructor arguments
    """

    def __init__(self, message: str, chain: Optional[List[str]] = None, referenced: Optional[str] = None):
        super().__init__(message)
        self.chain: List[str] = list(chain or [])
        self.referenced: Optional[str] = referenced


class AbstractServiceError(ServiceGraphError):
    """
    Raised when an abstract service is requested.

    Abstract definitions only exist to be extended by other definitions
    through the ``extends`` option.
    """

    pass


class ReadOnlyError(ServiceGraphError):
    """
    Raised when trying to overwrite a read only service.

    Common causes:
        - Registering a service under one of the reserved container names
          (``container``, ``service_container``, ``services_container``,
          ``di_container``)
        - Loading two configuration files that define the same read only
          service

    Solution:
        Pick a different name. The original definition stays untouched.
    """

    pass


class InvalidServiceError(ServiceGraphError):
    """
    Raised when a service definition is malformed or cannot be built.

    Common causes:
        - Factory service given without a factory method
        - Malformed ``call`` or ``notify`` entries
        - Alias pointing at an undefined service or colliding with
          another definition
        - Extending an object or factory service
        - Unknown class identifier
        - Any failure while resolving arguments, constructing the
          instance or running its method calls (the original error is
          chained as ``__cause__``)

    Attributes:
        service_name: Name of the service whose definition failed, if known
    """

    def __init__(self, message: str, service_name: Optional[str] = None):
        super().__init__(message)
        self.service_name: Optional[str] = service_name


class TypeNotFoundError(InvalidServiceError):
    """
    Raised when a class identifier is not known to the type locator.

    Solution:
        Register the type with the locator given to the container::

            locator = TypeLocator()
            locator.register_type(Mailer, 'app.Mailer')
            container = ServiceGraphContainer(type_locator=locator)
    """

    pass


class ParameterNotFoundError(ServiceGraphError):
    """
    Raised when an undefined parameter is read directly.

    Placeholders inside strings never raise this error, undefined
    ``%name%`` tokens are left as literal text.
    """

    pass


class InvalidFileError(ServiceGraphError):
    """
    Raised when a configuration file cannot be understood.

    Common causes:
        - Unsupported extension (only ``.yml``, ``.yaml`` and ``.json``)
        - Syntax errors in the file
        - Top level of the file is not a mapping
    """

    pass


class ConfigFileNotFoundError(ServiceGraphError, FileNotFoundError):
    """Raised when a configuration file to load does not exist."""

    pass
