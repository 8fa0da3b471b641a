"""
Visibility Tests

Tests for private, abstract and read only services
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from servicegraph import AbstractServiceError, InvalidServiceError, PrivateServiceError, ReadOnlyError

from conftest import ServiceGraphTestCase
from fixtures import ArgumentedService, CollectionService, SimpleService


class TestPrivateServices(ServiceGraphTestCase):
    """Private services are only reachable as dependencies"""

    def test_private_service_cannot_be_fetched(self):
        """get() on a private service raises"""
        self.container.register('hidden', {'class': SimpleService, 'private': True})

        with self.assertRaises(PrivateServiceError):
            self.container.get('hidden')

    def test_private_service_can_be_injected(self):
        """A private service is resolvable as a constructor argument"""
        self.container.register('hidden', {'class': SimpleService, 'private': True})
        self.container.register('public', {'class': ArgumentedService, 'arguments': ['@hidden']})

        self.assertIsInstance(self.container.get('public').name, SimpleService)

    def test_private_service_through_alias(self):
        """Aliases of a private service are private too"""
        self.container.register('hidden', {'class': SimpleService, 'private': True, 'aliases': ['other']})

        with self.assertRaises(PrivateServiceError):
            self.container.get('other')

    def test_private_services_in_collection(self):
        """Private items are injected into a collection through calls"""
        self.container.register('item.one', {'class': SimpleService, 'private': True})
        self.container.register('item.two', {'class': SimpleService, 'private': True})
        self.container.register('collection', {
            'class': CollectionService,
            'call': [
                ['add_service', ['one', '@item.one']],
                ['add_service', ['two', '@item.two']],
            ],
        })

        collection = self.container.get('collection')
        self.assertEqual(sorted(collection.services), ['one', 'two'])

    def test_private_service_from_closure(self):
        """Closures run inside a resolution and may fetch private services"""
        self.container.register('hidden', {'class': SimpleService, 'private': True})
        self.container.set('public', lambda c: ArgumentedService(c.get('hidden')))

        self.assertIsInstance(self.container.get('public').name, SimpleService)

    def test_private_check_after_resolution(self):
        """A private service stays private once it has been built"""
        self.container.register('hidden', {'class': SimpleService, 'private': True})
        self.container.register('public', {'class': ArgumentedService, 'arguments': ['@hidden']})
        self.container.get('public')

        with self.assertRaises(PrivateServiceError):
            self.container.get('hidden')

    def test_private_object(self):
        """Objects set on the container can be private"""
        self.container.set('hidden', SimpleService(), {'private': True})

        with self.assertRaises(PrivateServiceError):
            self.container.get('hidden')

        self.assertTrue(self.container.has('hidden'))


class TestAbstractServices(ServiceGraphTestCase):
    """Abstract services are never built"""

    def test_abstract_service_cannot_be_fetched(self):
        """get() on an abstract service raises"""
        self.container.register('base', {'class': SimpleService, 'abstract': True})

        with self.assertRaises(AbstractServiceError):
            self.container.get('base')

    def test_abstract_dependency(self):
        """Injecting an abstract service fails"""
        self.container.register('base', {'class': SimpleService, 'abstract': True})
        self.container.register('user', {'class': ArgumentedService, 'arguments': ['@base']})

        with self.assertRaises(InvalidServiceError) as ctx:
            self.container.get('user')

        self.assertIsInstance(ctx.exception.__cause__, AbstractServiceError)


class TestReadOnlyServices(ServiceGraphTestCase):
    """Read only services cannot be replaced"""

    def test_overwrite_read_only_service(self):
        """Registering over a read only service raises"""
        self.container.register('locked', {'class': SimpleService, 'read_only': True})

        with self.assertRaises(ReadOnlyError):
            self.container.register('locked', ArgumentedService)

        self.assertIsInstance(self.container.get('locked'), SimpleService)

    def test_set_over_read_only_service(self):
        """set() respects read only services too"""
        self.container.set('locked', SimpleService(), {'read_only': True})

        with self.assertRaises(ReadOnlyError):
            self.container.set('locked', SimpleService())

    def test_container_names_are_read_only(self):
        """The container's own names are protected"""
        for name in ('container', 'service_container', 'services_container', 'di_container'):
            with self.assertRaises(ReadOnlyError):
                self.container.register(name, SimpleService)

        self.assertIs(self.container.get('di_container'), self.container)


if __name__ == '__main__':
    unittest.main()
