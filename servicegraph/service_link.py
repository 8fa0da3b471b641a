"""
ServiceLink

Reference token produced while parsing ``@name`` / ``@name?`` arguments
"""

from dataclasses import dataclass
from typing import Any

LINK_PREFIX = '@'
OPTIONAL_SUFFIX = '?'


@dataclass(frozen=True)
class ServiceLink:
    """Pending reference to another service"""
    name: str
    optional: bool = False

    @classmethod
    def parse(cls, value: Any) -> Any:
        """Turn an ``@name`` string into a link, leave anything else alone.

        Example::

            ServiceLink.parse('@mailer')    # ServiceLink('mailer', False)
            ServiceLink.parse('@logger?')   # ServiceLink('logger', True)
            ServiceLink.parse('plain text') # 'plain text'
        """
        if not isinstance(value, str) or not value.startswith(LINK_PREFIX):
            return value

        name = value[len(LINK_PREFIX):]
        optional = name.endswith(OPTIONAL_SUFFIX)
        if optional:
            name = name[:-len(OPTIONAL_SUFFIX)]
        return cls(name, optional)
