import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.pool import StaticPool

from storefront.data.database import Base
from storefront.data.models.address import AddressModel
from storefront.data.models.user import UserModel
from storefront.domain.exceptions import AddressNotFound, MissingCheckoutAddress
from storefront.domain.schemas import AddressCreate
from storefront.services.address_service import AddressService


@pytest.fixture
def engine():
    # foreign keys enforced, as on Postgres
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(autouse=True)
def users(db):
    db.add_all([UserModel(id=1, name="Ann", email="ann@example.com"), UserModel(id=2, name="Bo", email="bo@example.com")])
    db.commit()


@pytest.fixture
def address_service(db):
    return AddressService(db)


def _payload(line1="1 Main St", is_default=False):
    return AddressCreate(line1=line1, city="Town", postal_code="00-001", country="PL", is_default=is_default)


def _cart_using(cart_service, seed_cart, address_id):
    seed_cart(1, (1, None, 1, "100.00"))
    cart_service.set_shipping_address(1, address_id)
    return cart_service.set_billing_address(1, address_id)


def test_delete_address_used_by_cart(db, address_service, cart_service, seed_cart):
    address = address_service.create_address(1, _payload())
    version = _cart_using(cart_service, seed_cart, address.id).version

    address_service.delete_address(1, address.id)

    cart = cart_service.get_cart(1)
    assert (cart.shipping_address_id, cart.billing_address_id) == (None, None)
    assert cart.version == version + 2
    with pytest.raises(MissingCheckoutAddress):
        cart_service.checkout(1)


def test_deleted_address_is_hidden_but_kept(db, address_service):
    address = address_service.create_address(1, _payload())

    address_service.delete_address(1, address.id)

    assert address_service.list_addresses(1) == []
    with pytest.raises(AddressNotFound):
        address_service.get_address(1, address.id)
    assert db.get(AddressModel, address.id).is_deleted


def test_deleted_address_cannot_be_attached_to_cart(address_service, cart_service, seed_cart):
    address = address_service.create_address(1, _payload())
    seed_cart(1, (1, None, 1, "100.00"))
    address_service.delete_address(1, address.id)

    with pytest.raises(AddressNotFound):
        cart_service.set_shipping_address(1, address.id)


def test_cannot_delete_someone_elses_address(address_service):
    address = address_service.create_address(2, _payload())

    with pytest.raises(AddressNotFound):
        address_service.delete_address(1, address.id)
    assert address_service.get_address(2, address.id).id == address.id


def test_new_default_address_replaces_previous(address_service):
    first = address_service.create_address(1, _payload("1 Main St", is_default=True))
    second = address_service.create_address(1, _payload("2 Side St", is_default=True))

    assert address_service.get_default_address(1).id == second.id
    assert not address_service.get_address(1, first.id).is_default


def test_no_default_address(address_service):
    address_service.create_address(1, _payload())

    assert address_service.get_default_address(1) is None


def test_set_default_address(address_service):
    first = address_service.create_address(1, _payload("1 Main St", is_default=True))
    second = address_service.create_address(1, _payload("2 Side St"))
    other_user = address_service.create_address(2, _payload("3 Far St", is_default=True))

    address_service.set_default_address(1, second.id)

    assert address_service.get_default_address(1).id == second.id
    assert [a.id for a in address_service.list_addresses(1) if a.is_default] == [second.id]
    assert not address_service.get_address(1, first.id).is_default
    # defaults are per user
    assert address_service.get_default_address(2).id == other_user.id


def test_set_default_requires_ownership(address_service):
    address = address_service.create_address(2, _payload())

    with pytest.raises(AddressNotFound):
        address_service.set_default_address(1, address.id)


def test_deleting_default_leaves_no_default(address_service):
    address = address_service.create_address(1, _payload(is_default=True))

    address_service.delete_address(1, address.id)

    assert address_service.get_default_address(1) is None


def test_update_address_creates_replacement(db, address_service, cart_service, seed_cart):
    old = address_service.create_address(1, _payload("1 Main St", is_default=True))
    _cart_using(cart_service, seed_cart, old.id)

    new = address_service.update_address(1, old.id, _payload("9 New St", is_default=True))

    assert new.id != old.id
    assert new.line1 == "9 New St"
    assert address_service.get_default_address(1).id == new.id
    assert [a.id for a in address_service.list_addresses(1)] == [new.id]
    assert db.get(AddressModel, old.id).line1 == "1 Main St"

    cart = cart_service.get_cart(1)
    assert (cart.shipping_address_id, cart.billing_address_id) == (new.id, new.id)


def test_update_unknown_address(address_service):
    with pytest.raises(AddressNotFound):
        address_service.update_address(1, 999, _payload())
