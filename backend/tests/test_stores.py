from unittest import mock

import pytest
from pymongo.errors import AutoReconnect, OperationFailure

from payment_api.errors import Internal
from payment_api.stores import AccountStore, OrderStore, parse_object_id


def test_parse_object_id_rejects_garbage():
    assert parse_object_id("nope") is None
    assert parse_object_id(None) is None
    assert str(parse_object_id("64b7f0c2a1b2c3d4e5f60718")) == "64b7f0c2a1b2c3d4e5f60718"


def test_store_errors_become_internal():
    collection = mock.MagicMock()
    collection.find_one.side_effect = AutoReconnect("connection reset")
    store = AccountStore(collection)

    with pytest.raises(Internal) as excinfo:
        store.find_by_email("a@x.com")
    assert excinfo.value.message == "Internal server error"


def test_index_failure_is_only_logged(caplog):
    collection = mock.MagicMock()
    collection.create_index.side_effect = OperationFailure("not authorized")

    OrderStore(collection).ensure_indexes()

    assert "Unable to ensure indexes for orders" in caplog.text


def test_set_status_skips_invalid_id():
    collection = mock.MagicMock()
    assert OrderStore(collection).set_status("bogus", "accepted") is None
    collection.find_one_and_update.assert_not_called()


def test_close_releases_clients(stores):
    client = stores.clients[0]
    with mock.patch.object(client, "close") as close:
        stores.close()
    close.assert_called_once_with()
    assert stores.clients == []


def test_missing_id_deletes_nothing(stores):
    stores.accounts.insert({"email": "a@x.com", "phone": "1", "passwordHash": b"h"})
    assert stores.accounts.delete_by_id(None) is False
    assert stores.accounts.collection.count_documents({}) == 1
