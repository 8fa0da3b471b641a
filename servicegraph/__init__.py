# Public API
from importlib.metadata import PackageNotFoundError, version

from .container import ServiceGraphContainer
from .definition import Definition, MethodCall, NotifyEntry
from .definition_kind import DefinitionKind
from .exceptions import (
    AbstractServiceError,
    CircularReferenceError,
    ConfigFileNotFoundError,
    InvalidFileError,
    InvalidServiceError,
    ParameterNotFoundError,
    PrivateServiceError,
    ReadOnlyError,
    ServiceGraphError,
    ServiceNotFoundError,
    TypeNotFoundError,
)
from .resolution_context import ResolutionContext, VisitState
from .service_link import ServiceLink
from .type_locator import TypeLocator

__all__ = [
    "ServiceGraphContainer",
    "TypeLocator",
    "Definition",
    "DefinitionKind",
    "MethodCall",
    "NotifyEntry",
    "ServiceLink",
    "ResolutionContext",
    "VisitState",
    # Exceptions
    "ServiceGraphError",
    "ServiceNotFoundError",
    "PrivateServiceError",
    "CircularReferenceError",
    "AbstractServiceError",
    "ReadOnlyError",
    "InvalidServiceError",
    "TypeNotFoundError",
    "ParameterNotFoundError",
    "InvalidFileError",
    "ConfigFileNotFoundError",
]

try:
    __version__ = version("servicegraph")
except PackageNotFoundError:
    # Running from a source checkout
    __version__ = '0.0.0'
