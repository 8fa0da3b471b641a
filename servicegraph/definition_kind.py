"""
DefinitionKind Enum

Defines how a service definition constructs its instance
"""

from enum import Enum


class DefinitionKind(Enum):
    """Construction strategy of a definition"""
    PLAIN = "PLAIN"
    OBJECT = "OBJECT"
    CLOSURE = "CLOSURE"
    FACTORY = "FACTORY"
