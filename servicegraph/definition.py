"""
Definition

Data classes describing how to build one service
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Union

from .definition_kind import DefinitionKind


# Arguments are either positional (list) or keyword (mapping)
Arguments = Union[List[Any], dict]


@dataclass
class MethodCall:
    """Method to call on a freshly built instance"""
    method: str
    arguments: Arguments = field(default_factory=list)


@dataclass
class NotifyEntry:
    """Method call waiting for its target service to be registered"""
    service: str
    method: str
    arguments: Arguments = field(default_factory=list)


@dataclass
class Definition:
    """Service definition.

    The four construction strategies share this one record and are told
    apart by ``kind``:

    - PLAIN: ``class_name`` is looked up (through parameters and the type
      locator) and called with ``arguments``
    - OBJECT: ``target`` is returned as is
    - CLOSURE: ``target`` is called with the container
    - FACTORY: ``factory_method`` is called on the ``factory_service``
      instance with ``factory_arguments``

    Aliases never copy a definition, they bind another name to the very
    same object, so the instance cache is shared between all names.
    """
    name: str
    kind: DefinitionKind = DefinitionKind.PLAIN
    class_name: Any = None
    arguments: Arguments = field(default_factory=list)
    method_calls: List[MethodCall] = field(default_factory=list)
    extends: Optional[str] = None
    singleton: bool = True
    abstract: bool = False
    read_only: bool = False
    private: bool = False
    target: Any = None  # Held object (OBJECT) or callable (CLOSURE)
    factory_service: Optional[str] = None
    factory_method: Optional[str] = None
    factory_arguments: Arguments = field(default_factory=list)
    instance: Any = field(default=None, repr=False)
    instantiated: bool = field(default=False, repr=False)

    @classmethod
    def for_object(cls, name: str, obj: Any) -> 'Definition':
        """Definition that always returns ``obj``."""
        return cls(name=name, kind=DefinitionKind.OBJECT, target=obj, instance=obj, instantiated=True)

    @classmethod
    def for_closure(cls, name: str, closure: Callable[[Any], Any]) -> 'Definition':
        """Definition that calls ``closure(container)`` to build the service."""
        return cls(name=name, kind=DefinitionKind.CLOSURE, target=closure)

    @classmethod
    def for_factory(
        cls,
        name: str,
        factory_service: str,
        factory_method: str,
        factory_arguments: Optional[Arguments] = None
    ) -> 'Definition':
        """Definition built by calling a method of another service."""
        return cls(
            name=name,
            kind=DefinitionKind.FACTORY,
            factory_service=factory_service,
            factory_method=factory_method,
            factory_arguments=factory_arguments if factory_arguments is not None else [],
        )

    @property
    def is_extending(self) -> bool:
        return bool(self.extends)

    @property
    def is_instantiated(self) -> bool:
        return self.instantiated

    def add_method_call(self, method: str, arguments: Optional[Arguments] = None) -> MethodCall:
        call = MethodCall(method, arguments if arguments is not None else [])
        self.method_calls.append(call)
        return call

    def set_instance(self, instance: Any) -> None:
        """Cache the built instance. Non singletons keep no reference."""
        if not self.singleton:
            return
        self.instance = instance
        self.instantiated = True

    def clear_instance(self) -> None:
        if self.kind == DefinitionKind.OBJECT:
            return
        self.instance = None
        self.instantiated = False

    def merged_with(self, parent: 'Definition') -> 'Definition':
        """Return a clone of this definition with ``parent`` folded in.

        Class and arguments are inherited only when not set here. Parent
        method calls run before the child's own calls. The clone never
        carries a cached instance.

        Args:
            parent: The already merged parent definition

        Returns:
            A new Definition
        """
        merged = copy.copy(self)
        merged.instance = None
        merged.instantiated = False
        if not merged.class_name:
            merged.class_name = parent.class_name
        if not merged.arguments:
            merged.arguments = parent.arguments
        merged.method_calls = list(parent.method_calls) + list(self.method_calls)
        return merged
