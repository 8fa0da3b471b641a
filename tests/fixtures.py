"""
Test Fixtures

Common test classes used across test modules
"""

from servicegraph import TypeLocator


class SimpleService:
    """Service without dependencies"""
    pass


class ArgumentedService:
    """Service taking plain constructor arguments"""

    def __init__(self, name=None, version=None, stability=None):
        self.name = name
        self.version = version
        self.stability = stability


class ParametrizedService:
    """Service taking another service and parameters"""

    def __init__(self, simple, name, version, debug, not_existent=None):
        self.simple = simple
        self.name = name
        self.version = version
        self.debug = debug
        self.not_existent = not_existent


class CalledService:
    """Service configured through method calls"""

    def __init__(self, name, version):
        self.name = name
        self.version = version
        self.simple = None
        self.optionally_simple = None
        self.called_service = None
        self.calls = []

    def set_name(self, name):
        self.calls.append('set_name')
        self.name = name

    def set_version(self, version):
        self.calls.append('set_version')
        self.version = version

    def set_simple(self, simple, optionally_simple=None):
        self.calls.append('set_simple')
        self.simple = simple
        if optionally_simple is not None:
            self.set_optionally_simple(optionally_simple)

    def set_optionally_simple(self, optionally_simple=None):
        self.calls.append('set_optionally_simple')
        self.optionally_simple = optionally_simple

    def set_called_service(self, called_service):
        self.calls.append('set_called_service')
        self.called_service = called_service


class ExtendedService(CalledService):
    """Subclass of CalledService with extra setters"""

    def __init__(self, name, version, subname=None):
        super().__init__(name, version)
        self.subname = subname
        self.extended = False

    def set_subname(self, subname):
        self.calls.append('set_subname')
        self.subname = subname

    def set_extended(self, extended):
        self.calls.append('set_extended')
        self.extended = extended


class CollectionService:
    """Service collecting other services by name"""

    def __init__(self):
        self.services = {}

    def add_service(self, name, service):
        self.services[name] = service


class RecordingService:
    """Service recording the names of its invoked methods"""

    def __init__(self):
        self.calls = []

    def trigger(self, dependency=None):
        self.calls.append('trigger')

    def hello(self):
        self.calls.append('hello')


class SimpleFactory:
    """Factory building SimpleService instances"""

    def __init__(self):
        self.created = 0

    def create(self):
        self.created += 1
        return SimpleService()


class NamedProduct:
    """Product with a name"""

    def __init__(self, name):
        self.name = name


class NamedFactory:
    """Factory building named products"""

    def __init__(self, prefix=''):
        self.prefix = prefix

    def create(self, name):
        return NamedProduct(self.prefix + name)


class FailingService:
    """Service whose constructor always fails"""

    def __init__(self):
        raise RuntimeError("boom")


FIXTURE_TYPES = {
    'fixtures.SimpleService': SimpleService,
    'fixtures.ArgumentedService': ArgumentedService,
    'fixtures.ParametrizedService': ParametrizedService,
    'fixtures.CalledService': CalledService,
    'fixtures.ExtendedService': ExtendedService,
    'fixtures.CollectionService': CollectionService,
    'fixtures.RecordingService': RecordingService,
    'fixtures.SimpleFactory': SimpleFactory,
    'fixtures.NamedProduct': NamedProduct,
    'fixtures.NamedFactory': NamedFactory,
    'fixtures.FailingService': FailingService,
}


def create_locator() -> TypeLocator:
    """Type locator knowing every fixture class under 'fixtures.<Name>'."""
    return TypeLocator(FIXTURE_TYPES)
