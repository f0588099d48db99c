import mongomock
import pytest

from payment_api.accounts import AdminAccountService, CredentialService
from payment_api.app import create_app
from payment_api.orders import (
    OrderIntakeService,
    OrderLifecycleService,
    OrderQueryService,
)
from payment_api.stores import AccountStore, OrderStore, Stores

TEST_CONFIG = {
    "BCRYPT_ROUNDS": 4,
    "CORS_ORIGIN": "https://shop.example.com",
    "LOG_LEVEL": "WARNING",
}


@pytest.fixture
def stores():
    client = mongomock.MongoClient()
    account_store = AccountStore(client.authdb.users)
    order_store = OrderStore(client.paymentdb.paymentInfo)
    account_store.ensure_indexes()
    order_store.ensure_indexes()
    return Stores(account_store, order_store, clients=[client])


@pytest.fixture
def credentials(stores):
    return CredentialService(stores.accounts, rounds=4)


@pytest.fixture
def admin_accounts(stores):
    return AdminAccountService(stores.accounts)


@pytest.fixture
def intake(stores):
    return OrderIntakeService(stores.orders)


@pytest.fixture
def queries(stores):
    return OrderQueryService(stores.orders)


@pytest.fixture
def lifecycle(stores):
    return OrderLifecycleService(stores.orders)


@pytest.fixture
def app(stores):
    return create_app(TEST_CONFIG, stores=stores)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def order_payload():
    return {
        "productId": "p-100",
        "productName": "Henna Cone Set",
        "email": "a@x.com",
        "phone": "0123456789",
        "quantity": 2,
        "price": 450,
        "address": "12 Lake Road",
    }


@pytest.fixture
def test_config():
    return dict(TEST_CONFIG)
