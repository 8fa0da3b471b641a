"""
ServiceGraphContainer

This module provides the DI container: the registry of service
definitions and parameters, and the entry point of service resolution.
It is responsible for:

- Storing definitions, aliases and parameters
- Expanding registration options (classes, factories, calls, notify)
- Queueing notifications for services that are not registered yet
- Detecting circular references between services
- Loading definitions from configuration mappings and files

Example::

    container = ServiceGraphContainer()
    container.set_parameter('mailer.transport', 'smtp')
    container.register('mailer', {
        'class': Mailer,
        'arguments': ['%mailer.transport%'],
    })
    container.register('newsletter', {
        'class': Newsletter,
        'arguments': ['@mailer'],
    })

    newsletter = container.get('newsletter')
"""

import inspect
import logging
import os
from typing import Any, Dict, List, Optional, Set

from .definition import Arguments, Definition, NotifyEntry
from .exceptions import (
    CircularReferenceError,
    InvalidServiceError,
    ParameterNotFoundError,
    PrivateServiceError,
    ReadOnlyError,
    ServiceNotFoundError,
)
from .loader import load_file
from .options import expand_options, parse_calls, parse_notifications
from .parameters import ParameterResolver
from .resolution_context import ResolutionContext, VisitState
from .resolver import ServicesResolver
from .type_locator import TypeLocator

logger = logging.getLogger(__name__)

# Names under which every container registers itself
CONTAINER_NAME = 'container'
CONTAINER_ALIASES = ('service_container', 'services_container', 'di_container')


class ServiceGraphContainer:
    """DI container resolving named services on demand.

    Services are registered with options (class, arguments, method calls,
    factory, inheritance, aliases, visibility, lifecycle) and are only
    built when first requested. Arguments may contain ``%parameter%``
    placeholders and ``@service`` references (``@service?`` when optional).

    Each container owns all of its state. Several containers can live
    side by side without sharing anything.

    Attributes:
        type_locator: Lookup of class identifiers used by definitions
    """

    def __init__(self, type_locator: Optional[TypeLocator] = None):
        """Initialize an empty container.

        Args:
            type_locator: Constructors for string class identifiers. An
                empty locator is used when omitted, in which case
                definitions must name Python classes directly.
        """
        self.type_locator: TypeLocator = type_locator if type_locator is not None else TypeLocator()
        self._parameters: Dict[str, Any] = {}
        self._services: Dict[str, Definition] = {}
        self._notify_queue: Dict[str, List[NotifyEntry]] = {}
        self._loaded_files: Set[str] = set()
        self._context = ResolutionContext()
        self._parameter_resolver = ParameterResolver(self._parameters)
        self._resolver = ServicesResolver(self, self._parameter_resolver, self.type_locator)

        self.set(CONTAINER_NAME, self, {
            'read_only': True,
            'aliases': list(CONTAINER_ALIASES),
        })

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def set(self, name: str, obj: Any, options: Optional[Dict[str, Any]] = None) -> None:
        """Register an existing object, or a closure building the service.

        Plain functions, lambdas and bound methods are treated as closures:
        they are called with the container to build the service. Any other
        object is returned as is. That includes classes, ``functools.partial``
        objects and instances defining ``__call__``. Wrap those in a lambda
        to have them called with the container::

            container.set('client', lambda c: make_client(c))

        Args:
            name: Name of the service
            obj: The service object or a closure ``(container) -> service``
            options: Options such as ``read_only``, ``singleton``,
                ``private``, ``aliases``, ``call`` or ``notify``

        Raises:
            ReadOnlyError: When overwriting a read only service

        Example::

            container.set('clock', SystemClock())
            container.set('request_id', lambda c: uuid.uuid4(), {'singleton': False})
        """
        if inspect.isfunction(obj) or inspect.ismethod(obj):
            definition = Definition.for_closure(name, obj)
        else:
            definition = Definition.for_object(name, obj)
        self._add_definition(definition, options)

    def register(self, name: str, options: Any = None) -> None:
        """Register a service definition.

        Args:
            name: Name of the service
            options: An options mapping, a class (or class identifier), or
                a compact factory list ``[factory_service, method, args]``

        Raises:
            ReadOnlyError: When overwriting a read only service
            InvalidServiceError: When the options are malformed

        Example::

            container.register('mailer', Mailer)
            container.register('newsletter', {
                'class': 'app.Newsletter',
                'arguments': ['@mailer', '%newsletter.sender%'],
                'call': [['set_logger', ['@logger?']]],
            })
            container.register('connection', ['@connection_factory', 'create'])
        """
        self._add_definition(Definition(name=name), options)

    def _add_definition(self, definition: Definition, options: Any) -> None:
        name = definition.name
        previous = self._services.get(name)
        if previous is not None and previous.read_only:
            raise ReadOnlyError(f'Could not overwrite a read only service "{name}".')

        options = expand_options(name, options)

        if options['alias']:
            self._bind_alias(name, options['alias'])
            return

        if options['factory_service']:
            definition = Definition.for_factory(
                name,
                options['factory_service'],
                options['factory_method'],
                options['factory_arguments'],
            )

        definition.extends = options['extends']
        definition.class_name = options['class']
        definition.arguments = options['arguments']
        definition.singleton = bool(options['singleton'])
        definition.abstract = bool(options['abstract'])
        definition.read_only = bool(options['read_only'])
        definition.private = bool(options['private'])

        # Validate everything before touching the registry
        calls = parse_calls(name, options['call'])
        notifications = parse_notifications(name, options['notify'])
        aliases = [alias for alias in options['aliases'] if alias != name]
        for alias in aliases:
            existing = self._services.get(alias)
            if existing is not None and (previous is None or existing is not previous):
                raise InvalidServiceError(
                    f'Trying to overwrite a previously defined service with an alias "{alias}" for "{name}".',
                    name
                )

        self._services[name] = definition
        for alias in aliases:
            self._services[alias] = definition
        self._clear_internal_caches()
        logger.debug("Registered %s service %s", definition.kind.value.lower(), name)

        for method, arguments in calls:
            self._attach_call(definition, method, arguments)

        for service, method, arguments in notifications:
            self._notify(definition, service, method, arguments)

        for bound_name in [name] + aliases:
            self._drain_notifications(bound_name, definition)

    def _bind_alias(self, name: str, target_name: str) -> None:
        target = self._services.get(target_name)
        if target is None:
            raise InvalidServiceError(
                f'Service "{name}" is an alias of an undefined service "{target_name}".',
                name
            )

        existing = self._services.get(name)
        if existing is not None and existing is not target:
            raise InvalidServiceError(
                f'Trying to overwrite a previously defined service "{name}" with an alias of "{target_name}".',
                name
            )

        self._services[name] = target
        self._clear_internal_caches()
        logger.debug("Bound alias %s to service %s", name, target.name)
        self._drain_notifications(name, target)

    def _notify(self, declaring: Definition, service: str, method: str, arguments: Arguments) -> None:
        arguments = ServicesResolver.bind_self(declaring.name, arguments)

        target = self._services.get(service)
        if target is not None:
            self._attach_call(target, method, arguments)
            return

        self._notify_queue.setdefault(service, []).append(NotifyEntry(service, method, arguments))
        logger.debug("Queued notification %s.%s() from %s", service, method, declaring.name)

    def _drain_notifications(self, name: str, definition: Definition) -> None:
        for entry in self._notify_queue.pop(name, []):
            logger.debug("Delivering queued notification %s.%s()", name, entry.method)
            self._attach_call(definition, entry.method, entry.arguments)

    def _attach_call(self, definition: Definition, method: str, arguments: Arguments) -> None:
        """Queue a method call, running it at once on a live instance."""
        call = definition.add_method_call(method, arguments)
        if not definition.is_instantiated:
            return

        # Resolve on behalf of the target so private services can be injected
        if self._context.is_loading(definition.name):
            self._resolver.call_method(definition, call)
        else:
            with self._context.visiting(definition.name):
                self._resolver.call_method(definition, call)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def get(self, name: str) -> Any:
        """Retrieve the service registered under ``name``.

        Args:
            name: Service name or alias

        Returns:
            The service instance

        Raises:
            ServiceNotFoundError: When the name is not registered
            PrivateServiceError: When a private service is requested from
                outside of another service's resolution
            CircularReferenceError: When the service (indirectly) depends
                on itself
            AbstractServiceError: When the service is abstract
            InvalidServiceError: When the service cannot be built
        """
        definition = self._services.get(name)
        if definition is None:
            raise ServiceNotFoundError(f'Requested undefined service "{name}".')

        if definition.private and self._context.is_idle():
            raise PrivateServiceError(f'Requested private service "{name}".')

        # A built singleton cannot take part in a cycle anymore
        if definition.singleton and definition.is_instantiated:
            return definition.instance

        if self._context.state_of(name) is VisitState.IN_PROGRESS:
            chain = self._context.loading_chain()
            self._context.clear()
            raise CircularReferenceError(
                f'Circular reference detected during loading of chained services {", ".join(chain)}. '
                f'Referenced service: "{name}".',
                chain,
                name
            )

        with self._context.visiting(name):
            return self._resolver.resolve(definition)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def has(self, name: str) -> bool:
        return name in self._services

    def __contains__(self, name: object) -> bool:
        return name in self._services

    def get_definition(self, name: str) -> Definition:
        """Return the definition registered under ``name`` (or alias).

        Raises:
            ServiceNotFoundError: When the name is not registered
        """
        definition = self._services.get(name)
        if definition is None:
            raise ServiceNotFoundError(f'Requested definition of an undefined service "{name}".')
        return definition

    def service_names(self) -> List[str]:
        """All registered names, aliases included, in registration order."""
        return list(self._services)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def set_parameter(self, name: str, value: Any) -> None:
        self._parameters[name] = value
        self._clear_internal_caches()

    def get_parameter(self, name: str) -> Any:
        """Return the parameter with all its placeholders resolved.

        Raises:
            ParameterNotFoundError: When there is no such parameter
        """
        if not self.has_parameter(name):
            raise ParameterNotFoundError(f'Requested undefined parameter "{name}".')
        return self._parameter_resolver.resolve_parameter(name)

    def has_parameter(self, name: str) -> bool:
        return name in self._parameters

    def parameter_names(self) -> List[str]:
        return list(self._parameters)

    def dump_parameters(self) -> Dict[str, Any]:
        """Return every parameter, fully resolved."""
        return self._parameter_resolver.resolve_all()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_from_file(self, path: str) -> bool:
        """Load parameters and services from a YAML or JSON file.

        Loading the same path again is a no-op.

        Raises:
            ConfigFileNotFoundError: When the file does not exist
            InvalidFileError: When the file cannot be parsed
        """
        key = os.path.abspath(path)
        if key in self._loaded_files:
            return True

        result = self.load_from_array(load_file(path))
        self._loaded_files.add(key)
        return result

    def load_from_array(self, definitions: Dict[str, Any]) -> bool:
        """Load parameters and services from a nested mapping.

        Args:
            definitions: Mapping with optional ``parameters`` (name to
                value) and ``services`` (name to options) keys

        Raises:
            InvalidServiceError: When a section is not a mapping or a
                service definition is malformed

        Example::

            container.load_from_array({
                'parameters': {'greeting': 'hello'},
                'services': {
                    'greeter': {'class': Greeter, 'arguments': ['%greeting%']},
                },
            })
        """
        if not isinstance(definitions, dict):
            raise InvalidServiceError("Definitions to load must be a mapping.")

        parameters = definitions.get('parameters') or {}
        services = definitions.get('services') or {}
        for section, value in (('parameters', parameters), ('services', services)):
            if not isinstance(value, dict):
                raise InvalidServiceError(f'The "{section}" section must be a mapping.')

        for name, value in parameters.items():
            self.set_parameter(name, value)

        for name, options in services.items():
            self.register(name, options)

        return True

    load_from_dict = load_from_array

    def _clear_internal_caches(self) -> None:
        self._resolver.clear_plans()
