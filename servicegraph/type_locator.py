"""
TypeLocator

Maps class identifiers used in definitions to construction callables.

The locator is supplied by the host application when the container is
created. Definitions registered with a Python class (instead of a string
identifier) bypass the locator entirely.

Example::

    locator = TypeLocator()
    locator.register_type(Mailer)                 # 'app.mail.Mailer'
    locator.register('mailer.smtp', SmtpMailer)   # custom identifier

    container = ServiceGraphContainer(type_locator=locator)
    container.register('mailer', 'mailer.smtp')
"""

import importlib
import logging
from typing import Any, Callable, Dict, Optional

from .exceptions import TypeNotFoundError

logger = logging.getLogger(__name__)


class TypeLocator:
    """Registry of constructors keyed by type identifier.

    Attributes:
        import_fallback: When True, unknown dotted identifiers are imported
            with importlib and remembered. Off by default.
    """

    def __init__(
        self,
        types: Optional[Dict[str, Callable[..., Any]]] = None,
        import_fallback: bool = False
    ):
        self._constructors: Dict[str, Callable[..., Any]] = dict(types or {})
        self.import_fallback = import_fallback

    def register(self, identifier: str, constructor: Callable[..., Any]) -> None:
        if not callable(constructor):
            raise TypeError(f"Constructor for '{identifier}' must be callable")
        self._constructors[identifier] = constructor

    def register_type(self, cls: type, identifier: Optional[str] = None) -> str:
        """Register a class under ``identifier`` or its dotted path.

        Returns:
            The identifier the class was registered under
        """
        if identifier is None:
            identifier = f"{cls.__module__}.{cls.__qualname__}"
        self.register(identifier, cls)
        return identifier

    def has(self, identifier: str) -> bool:
        return identifier in self._constructors

    def locate(self, identifier: Any) -> Callable[..., Any]:
        """Return the constructor for ``identifier``.

        Args:
            identifier: A registered identifier, or a callable which is
                returned as is

        Raises:
            TypeNotFoundError: When the identifier is unknown
        """
        if callable(identifier):
            return identifier

        if not isinstance(identifier, str) or not identifier:
            raise TypeNotFoundError(f"Invalid class identifier {identifier!r}")

        constructor = self._constructors.get(identifier)
        if constructor is not None:
            return constructor

        if self.import_fallback:
            constructor = self._import(identifier)
            self._constructors[identifier] = constructor
            return constructor

        known = ", ".join(sorted(self._constructors)) or "None"
        raise TypeNotFoundError(
            f"Class '{identifier}' is not known to the type locator.\n"
            f"Registered types: {known}\n"
            f"Hint: locator.register('{identifier}', MyClass)"
        )

    def _import(self, identifier: str) -> Callable[..., Any]:
        module_name, _, attribute_path = identifier.rpartition('.')
        if not module_name:
            raise TypeNotFoundError(f"Class '{identifier}' is not a dotted path")

        # Walk back until an importable module is found (nested classes)
        attributes = [attribute_path]
        while module_name:
            try:
                target: Any = importlib.import_module(module_name)
            except ImportError:
                module_name, _, head = module_name.rpartition('.')
                attributes.insert(0, head)
                continue
            try:
                for attribute in attributes:
                    target = getattr(target, attribute)
            except AttributeError as e:
                raise TypeNotFoundError(f"Class '{identifier}' was not found") from e
            if not callable(target):
                raise TypeNotFoundError(f"'{identifier}' is not instantiable")
            logger.debug("Imported type %s", identifier)
            return target

        raise TypeNotFoundError(f"Class '{identifier}' was not found")
