import pytest

from pico_registry import Container, ServiceFactory
from pico_registry.exceptions import AlreadyFinalizedError, InvalidRegistrationError

# --- Test Helpers ---


class Connection:
    def __init__(self, dsn):
        self.dsn = dsn


class Settings:
    dsn = "sqlite://"


class ConnectionFactory:
    created = 0

    def __init__(self, settings: Settings):
        self.settings = settings

    def create(self, container, args=None):
        ConnectionFactory.created += 1
        dsn = (args or {}).get("dsn", self.settings.dsn)
        return Connection(dsn)


class NoCreate:
    pass


@pytest.fixture
def container():
    ConnectionFactory.created = 0
    return Container()


def test_delegate_with_factory_class(container):
    container.delegate(Connection, ConnectionFactory)
    conn = container.get(Connection)
    assert conn.dsn == "sqlite://"
    assert container.get(Connection) is conn
    assert ConnectionFactory.created == 1


def test_delegate_passes_args(container):
    container.delegate(Connection, ConnectionFactory, {"dsn": "postgres://db"})
    assert container.get(Connection).dsn == "postgres://db"


def test_delegate_with_factory_instance(container):
    factory = ConnectionFactory(Settings())
    assert isinstance(factory, ServiceFactory)
    container.delegate("conn", factory, shared=False)
    a = container.get("conn")
    b = container.get("conn")
    assert a is not b
    assert ConnectionFactory.created == 2


def test_delegate_reuses_registered_factory(container):
    container.share(ConnectionFactory)
    container.delegate("primary", ConnectionFactory)
    container.delegate("replica", ConnectionFactory, {"dsn": "replica://"})
    container.get("primary")
    container.get("replica")
    assert container.is_finalized(ConnectionFactory)


def test_delegate_with_dotted_string_factory(container):
    container.delegate("conn", "pico_registry.container:Container")
    with pytest.raises(InvalidRegistrationError, match="create"):
        container.get("conn")


def test_delegate_rejects_factory_without_create(container):
    with pytest.raises(InvalidRegistrationError):
        container.delegate(Connection, NoCreate)
    with pytest.raises(InvalidRegistrationError):
        container.delegate(Connection, NoCreate())
    assert not container.has(Connection)


def test_delegate_after_resolution_fails(container):
    container.delegate(Connection, ConnectionFactory)
    container.get(Connection)
    with pytest.raises(AlreadyFinalizedError):
        container.delegate(Connection, ConnectionFactory)
