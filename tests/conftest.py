"""
Test Configuration and Utilities

Common base classes and helper functions for ServiceGraph tests
"""

import os
import sys
import unittest

# Add tests directory to path for local imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from servicegraph import ServiceGraphContainer

from fixtures import create_locator

RESOURCES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'resources')


class ServiceGraphTestCase(unittest.TestCase):
    """
    Base test case class for ServiceGraph tests.

    Creates a fresh container knowing all fixture types before each test.
    """

    def setUp(self):
        """Create a new container before each test"""
        self.container = ServiceGraphContainer(type_locator=create_locator())


def resource_path(name: str) -> str:
    """Absolute path of a file in tests/resources."""
    return os.path.join(RESOURCES_DIR, name)
