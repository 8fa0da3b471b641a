"""
TypeLocator Tests

Tests for mapping class identifiers to constructors
"""

import collections
import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from servicegraph import InvalidServiceError, ServiceGraphContainer, TypeLocator, TypeNotFoundError

from fixtures import ArgumentedService, SimpleService


class TestTypeLocator(unittest.TestCase):
    """Tests for TypeLocator"""

    def test_register_and_locate(self):
        """A registered identifier returns its constructor"""
        locator = TypeLocator()
        locator.register('app.Simple', SimpleService)

        self.assertTrue(locator.has('app.Simple'))
        self.assertIs(locator.locate('app.Simple'), SimpleService)

    def test_register_type_uses_dotted_path(self):
        """register_type defaults to module and qualified name"""
        locator = TypeLocator()
        identifier = locator.register_type(SimpleService)

        self.assertEqual(identifier, f'{SimpleService.__module__}.SimpleService')
        self.assertIs(locator.locate(identifier), SimpleService)

    def test_register_type_with_identifier(self):
        """register_type accepts a custom identifier"""
        locator = TypeLocator()

        self.assertEqual(locator.register_type(SimpleService, 'simple'), 'simple')
        self.assertTrue(locator.has('simple'))

    def test_register_requires_callable(self):
        """Constructors must be callable"""
        with self.assertRaises(TypeError):
            TypeLocator().register('broken', 'not callable')

    def test_callables_pass_through(self):
        """Classes and functions are returned as is"""
        factory = lambda: SimpleService()  # noqa: E731

        self.assertIs(TypeLocator().locate(SimpleService), SimpleService)
        self.assertIs(TypeLocator().locate(factory), factory)

    def test_unknown_identifier(self):
        """Unknown identifiers list the registered types"""
        locator = TypeLocator({'app.Simple': SimpleService})

        with self.assertRaises(TypeNotFoundError) as ctx:
            locator.locate('app.Unknown')

        message = str(ctx.exception)
        self.assertIn('app.Unknown', message)
        self.assertIn('app.Simple', message)
        self.assertIn('Hint', message)

    def test_invalid_identifier(self):
        """Empty and non string identifiers are rejected"""
        with self.assertRaises(TypeNotFoundError):
            TypeLocator().locate('')

        with self.assertRaises(TypeNotFoundError):
            TypeLocator().locate(42)

    def test_no_import_by_default(self):
        """Importable paths are not imported unless enabled"""
        with self.assertRaises(TypeNotFoundError):
            TypeLocator().locate('collections.OrderedDict')

    def test_import_fallback(self):
        """Dotted paths are imported when the fallback is enabled"""
        locator = TypeLocator(import_fallback=True)

        self.assertIs(locator.locate('collections.OrderedDict'), collections.OrderedDict)
        self.assertTrue(locator.has('collections.OrderedDict'))

    def test_import_fallback_nested_attribute(self):
        """Nested attributes are reached from the closest module"""
        locator = TypeLocator(import_fallback=True)

        self.assertIs(locator.locate('os.path.join'), os.path.join)

    def test_import_fallback_missing_attribute(self):
        """A missing attribute raises TypeNotFoundError"""
        locator = TypeLocator(import_fallback=True)

        with self.assertRaises(TypeNotFoundError):
            locator.locate('collections.DoesNotExist')

    def test_import_fallback_not_callable(self):
        """Imported attributes must be instantiable"""
        locator = TypeLocator(import_fallback=True)

        with self.assertRaises(TypeNotFoundError):
            locator.locate('os.sep')


class TestContainerTypeLocator(unittest.TestCase):
    """Tests for the locator used by the container"""

    def test_container_uses_locator(self):
        """String class identifiers are looked up in the locator"""
        locator = TypeLocator()
        locator.register('app.Argumented', ArgumentedService)
        container = ServiceGraphContainer(type_locator=locator)
        container.register('service', {'class': 'app.Argumented', 'arguments': ['named']})

        self.assertEqual(container.get('service').name, 'named')

    def test_unknown_class_names_the_service(self):
        """The error names the service and is an InvalidServiceError"""
        container = ServiceGraphContainer()
        container.register('service', 'app.Missing')

        with self.assertRaises(TypeNotFoundError) as ctx:
            container.get('service')

        self.assertIsInstance(ctx.exception, InvalidServiceError)
        self.assertEqual(ctx.exception.service_name, 'service')
        self.assertIn('"service"', str(ctx.exception))
        self.assertIn('app.Missing', str(ctx.exception))

    def test_default_locator_accepts_classes(self):
        """Without a locator definitions can still name Python classes"""
        container = ServiceGraphContainer()
        container.register('simple', SimpleService)

        self.assertIsInstance(container.get('simple'), SimpleService)


if __name__ == '__main__':
    unittest.main()
