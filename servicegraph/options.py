"""
Service options

Expansion and validation of the option mappings accepted by
``ServiceGraphContainer.register()`` and ``set()``.

Supported shorthands:

- ``'app.Mailer'`` or ``Mailer``: only a class
- ``['@factory', 'create', [args]]``: compact factory definition
- ``{'factory': ['@factory', 'create', [args]]}``: explicit factory key
"""

import logging
from typing import Any, Dict, List, Optional

from .exceptions import InvalidServiceError

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS: Dict[str, Any] = {
    'class': None,
    'extends': None,
    'arguments': [],
    'factory_service': None,
    'factory_method': None,
    'factory_arguments': [],
    'call': [],
    'notify': [],
    'abstract': False,
    'singleton': True,
    'alias': False,
    'aliases': [],
    'private': False,
    'read_only': False,
}


def as_argument_list(value: Any) -> Any:
    """Copy argument lists and mappings, wrap any single value in a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    return [value]


def expand_options(name: str, options: Any) -> Dict[str, Any]:
    """Expand shorthand options against the default schema.

    Args:
        name: Name of the service being registered (for error messages)
        options: Options mapping, class identifier, or compact factory list

    Returns:
        A new mapping containing every key of DEFAULT_OPTIONS

    Raises:
        InvalidServiceError: When a factory is missing its method
    """
    if options is None:
        options = {}
    elif isinstance(options, (list, tuple)):
        if len(options) not in (2, 3):
            raise InvalidServiceError(
                f'Compact factory definition of service "{name}" must have 2 or 3 elements: '
                f'[factory_service, factory_method, factory_arguments]',
                name
            )
        options = {'factory': list(options)}
    elif not isinstance(options, dict):
        # A bare class identifier or a Python class
        options = {'class': options}
    else:
        options = dict(options)

    if options.get('factory') is not None:
        factory = options.pop('factory')
        if not isinstance(factory, (list, tuple)) or len(factory) < 2 or not factory[0] or not factory[1]:
            raise InvalidServiceError(
                f'You have to specify factory service name and method when registering '
                f'a service built from a factory for "{name}".',
                name
            )
        options['factory_service'] = factory[0]
        options['factory_method'] = factory[1]
        options['factory_arguments'] = as_argument_list(factory[2]) if len(factory) > 2 else []
    else:
        options.pop('factory', None)

    unknown = sorted(set(options) - set(DEFAULT_OPTIONS))
    for key in unknown:
        logger.warning('Ignoring unknown option "%s" in definition of service "%s"', key, name)
        del options[key]

    expanded = {**DEFAULT_OPTIONS, **options}

    if expanded['factory_service'] and not expanded['factory_method']:
        raise InvalidServiceError(
            f'Cannot define service built from factory without specifying factory method for "{name}".',
            name
        )

    if isinstance(expanded['aliases'], str):
        expanded['aliases'] = [expanded['aliases']]
    expanded['aliases'] = list(expanded['aliases'] or [])
    expanded['arguments'] = as_argument_list(expanded['arguments'])
    expanded['factory_arguments'] = as_argument_list(expanded['factory_arguments'])

    return expanded


def parse_calls(name: str, calls: Any) -> List[tuple]:
    """Validate ``call`` entries into ``(method, arguments)`` pairs.

    Raises:
        InvalidServiceError: When an entry has no method name
    """
    parsed = []
    for call in calls or []:
        if not isinstance(call, (list, tuple)) or not call or not isinstance(call[0], str):
            raise InvalidServiceError(
                f'Invalid method calls definition in definition of service "{name}".',
                name
            )
        arguments = as_argument_list(call[1]) if len(call) > 1 else []
        parsed.append((call[0], arguments))
    return parsed


def parse_notifications(name: str, notifications: Any) -> List[tuple]:
    """Validate ``notify`` entries into ``(service, method, arguments)``.

    Raises:
        InvalidServiceError: When the target service or the method name is
            missing
    """
    parsed = []
    for notify in notifications or []:
        target: Optional[Any] = notify[0] if isinstance(notify, (list, tuple)) and notify else None
        if not isinstance(target, str):
            raise InvalidServiceError(
                f'Invalid service name given to notify about existence of "{name}".',
                name
            )
        if len(notify) < 2 or not isinstance(notify[1], str):
            raise InvalidServiceError(
                f'Invalid method name to call given to notify about existence of "{name}".',
                name
            )
        arguments = as_argument_list(notify[2]) if len(notify) > 2 else []
        parsed.append((target, notify[1], arguments))
    return parsed
