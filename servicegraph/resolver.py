"""
ServicesResolver

This module turns service definitions into instances. It is the engine
behind ``ServiceGraphContainer.get()``, responsible for:

- Merging ``extends`` hierarchies (parent first)
- Building and caching instantiation plans per service name
- Parsing arguments (parameters, ``@service`` links) and resolving links
- Caching singleton instances before running method calls, so setter
  injection can close a cycle between singletons
- Wrapping failures into InvalidServiceError, except circular references

The resolver is not used directly. Use ServiceGraphContainer instead.
"""

import logging
from typing import Any, Callable, Dict, TYPE_CHECKING

from .definition import Arguments, Definition, MethodCall
from .definition_kind import DefinitionKind
from .exceptions import (
    AbstractServiceError,
    CircularReferenceError,
    InvalidServiceError,
    TypeNotFoundError,
)
from .parameters import ParameterResolver
from .resolution_context import ResolutionContext
from .service_link import LINK_PREFIX, ServiceLink
from .type_locator import TypeLocator

if TYPE_CHECKING:
    from .container import ServiceGraphContainer

logger = logging.getLogger(__name__)

# Builds one instance of a service
InstantiationPlan = Callable[[], Any]


class ServicesResolver:
    """Resolves definitions into service instances.

    Attributes:
        container: The owning container, used to fetch linked services
        parameters: Resolver for ``%name%`` placeholders
        type_locator: Lookup of class identifiers for PLAIN definitions
    """

    def __init__(
        self,
        container: 'ServiceGraphContainer',
        parameters: ParameterResolver,
        type_locator: TypeLocator
    ):
        self.container = container
        self.parameters = parameters
        self.type_locator = type_locator
        self._plans: Dict[str, InstantiationPlan] = {}

    def clear_plans(self) -> None:
        """Forget every cached instantiation plan."""
        if self._plans:
            logger.debug("Clearing %d cached instantiation plans", len(self._plans))
        self._plans.clear()

    def resolve(self, definition: Definition) -> Any:
        """Resolve a definition into its instance.

        Steps:
        1. Return the cached instance of an already built singleton
        2. Refuse abstract definitions
        3. Merge the ``extends`` hierarchy
        4. Build the instance through the cached plan
        5. Cache the instance if singleton (before method calls)
        6. Run method calls in order

        Args:
            definition: The registered definition

        Returns:
            The service instance

        Raises:
            AbstractServiceError: When the definition is abstract
            CircularReferenceError: Propagated unchanged from nested lookups
            InvalidServiceError: For any other failure
        """
        if definition.singleton and definition.is_instantiated:
            return definition.instance

        if definition.abstract:
            raise AbstractServiceError(f'Could not instantiate abstract service "{definition.name}".')

        effective = self.resolve_hierarchy(definition)

        instance = self._instantiate(effective)
        definition.set_instance(instance)

        # Calls attached while these run are invoked at once by the container
        try:
            for call in list(effective.method_calls):
                self.call_method(effective, call, instance)
        except BaseException:
            definition.clear_instance()
            raise

        return instance

    def resolve_hierarchy(self, definition: Definition) -> Definition:
        """Return the effective definition with all parents merged in.

        Raises:
            InvalidServiceError: When a parent is missing or is an object or
                factory service
            CircularReferenceError: When the chain of parents loops
        """
        if not definition.is_extending:
            return definition
        return self._merge_parents(definition, ResolutionContext())

    def _merge_parents(self, definition: Definition, visited: ResolutionContext) -> Definition:
        if not definition.is_extending:
            return definition

        if visited.is_loading(definition.name):
            chain = visited.loading_chain()
            raise CircularReferenceError(
                f'Circular hierarchy detected while merging parents of services {", ".join(chain)}. '
                f'Extended service: "{definition.name}".',
                chain,
                definition.name
            )

        parent_name = self.parameters.resolve(definition.extends)
        if not self.container.has(parent_name):
            raise InvalidServiceError(
                f'Service "{definition.name}" tried to extend an unexisting service "{parent_name}".',
                definition.name
            )
        parent = self.container.get_definition(parent_name)

        if parent.kind in (DefinitionKind.OBJECT, DefinitionKind.FACTORY):
            raise InvalidServiceError(
                f'Service "{definition.name}" cannot extend {parent.kind.value.lower()} service "{parent.name}".',
                definition.name
            )

        with visited.visiting(definition.name):
            parent = self._merge_parents(parent, visited)

        return definition.merged_with(parent)

    def _instantiate(self, definition: Definition) -> Any:
        plan = self._plans.get(definition.name)
        if plan is None:
            plan = self._build_plan(definition)
            self._plans[definition.name] = plan
            logger.debug("Built instantiation plan for %s service %s", definition.kind.value.lower(), definition.name)

        try:
            return plan()
        except CircularReferenceError:
            raise
        except Exception as e:
            if isinstance(e, InvalidServiceError) and e.service_name == definition.name:
                raise
            raise InvalidServiceError(
                f'Could not instantiate service "{definition.name}": {e}',
                definition.name
            ) from e

    def _build_plan(self, definition: Definition) -> InstantiationPlan:
        """Prepare everything about building ``definition`` that does not
        depend on other services."""
        if definition.kind == DefinitionKind.OBJECT:
            target = definition.target
            return lambda: target

        if definition.kind == DefinitionKind.CLOSURE:
            closure = definition.target
            container = self.container
            return lambda: closure(container)

        if definition.kind == DefinitionKind.FACTORY:
            return self._build_factory_plan(definition)

        return self._build_class_plan(definition)

    def _build_class_plan(self, definition: Definition) -> InstantiationPlan:
        class_name = self.parameters.resolve(definition.class_name)
        if not class_name:
            raise InvalidServiceError(
                f'Could not instantiate service "{definition.name}" because it has no class.',
                definition.name
            )

        try:
            constructor = self.type_locator.locate(class_name)
        except TypeNotFoundError as e:
            raise TypeNotFoundError(
                f'Could not instantiate service "{definition.name}": {e}',
                definition.name
            ) from e
        arguments = self._parse_or_fail(definition, definition.arguments, "one or more of its arguments")

        def plan() -> Any:
            return _invoke(constructor, self._resolve_links(arguments))

        return plan

    def _build_factory_plan(self, definition: Definition) -> InstantiationPlan:
        factory_name = self.parameters.resolve(definition.factory_service)
        if isinstance(factory_name, str) and factory_name.startswith(LINK_PREFIX):
            factory_name = factory_name[len(LINK_PREFIX):]
        method_name = self.parameters.resolve(definition.factory_method)
        arguments = self._parse_or_fail(definition, definition.factory_arguments, "its factory arguments")

        def plan() -> Any:
            try:
                factory = self.container.get(factory_name)
                method = getattr(factory, method_name)
            except CircularReferenceError:
                raise
            except Exception as e:
                raise InvalidServiceError(
                    f'Could not instantiate service "{definition.name}" because factory '
                    f'"{factory_name}.{method_name}" is not available: {e}',
                    definition.name
                ) from e
            return _invoke(method, self._resolve_links(arguments))

        return plan

    def _parse_or_fail(self, definition: Definition, arguments: Arguments, what: str) -> Any:
        try:
            return self.parse_arguments(arguments)
        except Exception as e:
            raise InvalidServiceError(
                f'Could not instantiate service "{definition.name}" because {what} could not be resolved: {e}',
                definition.name
            ) from e

    def call_method(self, definition: Definition, call: MethodCall, instance: Any = None) -> Any:
        """Resolve the arguments of ``call`` and invoke it.

        Args:
            definition: Definition the call belongs to (for error messages)
            call: The method call
            instance: Target instance, defaults to the definition's cache

        Raises:
            CircularReferenceError: Propagated unchanged
            InvalidServiceError: When arguments cannot be resolved or the
                method fails
        """
        if instance is None:
            instance = definition.instance

        try:
            arguments = self._resolve_links(self.parse_arguments(call.arguments))
        except CircularReferenceError:
            raise
        except Exception as e:
            raise InvalidServiceError(
                f'Could not instantiate service "{definition.name}" because arguments of method '
                f'"{call.method}" could not be resolved: {e}',
                definition.name
            ) from e

        try:
            return _invoke(getattr(instance, call.method), arguments)
        except CircularReferenceError:
            raise
        except Exception as e:
            raise InvalidServiceError(
                f'Could not instantiate service "{definition.name}" because method '
                f'"{call.method}" failed: {e}',
                definition.name
            ) from e

    def parse_arguments(self, argument: Any) -> Any:
        """Resolve parameters and turn ``@name`` strings into ServiceLinks."""
        if isinstance(argument, dict):
            return {key: self.parse_arguments(value) for key, value in argument.items()}
        if isinstance(argument, (list, tuple)):
            return [self.parse_arguments(value) for value in argument]
        if isinstance(argument, str):
            argument = self.parameters.resolve(argument)
        return ServiceLink.parse(argument)

    def _resolve_links(self, argument: Any) -> Any:
        if isinstance(argument, dict):
            return {key: self._resolve_links(value) for key, value in argument.items()}
        if isinstance(argument, list):
            return [self._resolve_links(value) for value in argument]
        if isinstance(argument, ServiceLink):
            if argument.optional and not self.container.has(argument.name):
                return None
            return self.container.get(argument.name)
        return argument

    @staticmethod
    def bind_self(name: str, argument: Any) -> Any:
        """Replace lone ``@`` tokens with a reference to service ``name``."""
        if isinstance(argument, dict):
            return {key: ServicesResolver.bind_self(name, value) for key, value in argument.items()}
        if isinstance(argument, (list, tuple)):
            return [ServicesResolver.bind_self(name, value) for value in argument]
        if argument == LINK_PREFIX:
            return LINK_PREFIX + name
        return argument


def _invoke(target: Callable[..., Any], arguments: Any) -> Any:
    if isinstance(arguments, dict):
        return target(**arguments)
    return target(*arguments)
