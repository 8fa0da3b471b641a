"""
ParameterResolver

Resolves ``%name%`` placeholders against the container's parameters.

- A string that is exactly one placeholder is replaced by the parameter
  value itself, keeping its type (``'%debug%'`` gives ``True``)
- Placeholders inside longer strings are replaced by the stringified value
- Undefined placeholders stay as literal text
- Lists, tuples and mappings are resolved element by element
"""

import re
from typing import Any, Dict, Optional, Set

PLACEHOLDER_PATTERN = re.compile(r'%([^%\s]+)%')


class ParameterResolver:
    """Placeholder interpolation over a parameter table.

    Attributes:
        parameters: The live parameter table (shared with the container)
    """

    def __init__(self, parameters: Dict[str, Any]):
        self.parameters = parameters

    def resolve(self, value: Any) -> Any:
        """Resolve all placeholders found in ``value``.

        Args:
            value: Any value, strings and containers are walked

        Returns:
            A new value with placeholders substituted. Non string scalars
            are returned unchanged.
        """
        return self._resolve(value, set())

    def resolve_parameter(self, name: str) -> Any:
        """Resolve the value of parameter ``name``.

        Raises:
            KeyError: When the parameter is not defined
        """
        return self._lookup(name, set())

    def resolve_all(self) -> Dict[str, Any]:
        return {name: self.resolve_parameter(name) for name in self.parameters}

    def _resolve(self, value: Any, resolving: Set[str]) -> Any:
        if isinstance(value, str):
            return self._resolve_string(value, resolving)
        if isinstance(value, dict):
            return {key: self._resolve(item, resolving) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._resolve(item, resolving) for item in value]
        return value

    def _resolve_string(self, value: str, resolving: Set[str]) -> Any:
        whole = PLACEHOLDER_PATTERN.fullmatch(value)
        if whole is not None:
            name = whole.group(1)
            if name not in self.parameters or name in resolving:
                return value
            return self._lookup(name, resolving)

        def substitute(match: 're.Match[str]') -> str:
            name = match.group(1)
            if name not in self.parameters or name in resolving:
                return match.group(0)
            return _stringify(self._lookup(name, resolving))

        return PLACEHOLDER_PATTERN.sub(substitute, value)

    def _lookup(self, name: str, resolving: Set[str]) -> Any:
        # Parameter values may contain placeholders themselves
        return self._resolve(self.parameters[name], resolving | {name})


def _stringify(value: Optional[Any]) -> str:
    if value is None:
        return ''
    return str(value)
