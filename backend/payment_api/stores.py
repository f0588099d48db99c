"""
MongoDB-backed stores for accounts and orders.

Each store wraps a single ``pymongo`` collection and is handed to the
services that need it.  Store failures are logged and surfaced as
``Internal`` so callers only ever see the generic error envelope.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from flask_pymongo import PyMongo
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from .errors import Conflict, Internal

logger = logging.getLogger(__name__)


def parse_object_id(value) -> Optional[ObjectId]:
    if value is None:
        return None
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        logger.error("Error %s: %s", action, exc)
        raise Internal() from exc


class AccountStore:
    def __init__(self, collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        try:
            self.collection.create_index("email", unique=True)
        except PyMongoError as exc:
            logger.warning("Unable to ensure unique index for account emails: %s", exc)

    def find_by_email(self, email: str) -> Optional[Dict]:
        with store_errors("looking up account"):
            return self.collection.find_one({"email": email})

    def insert(self, document: Dict) -> ObjectId:
        with store_errors("creating account"):
            try:
                return self.collection.insert_one(document).inserted_id
            except DuplicateKeyError:
                raise Conflict()

    def list_all(self) -> List[Dict]:
        with store_errors("fetching registered users"):
            return list(self.collection.find({}, {"email": 1, "phone": 1}))

    def delete_by_id(self, account_id) -> bool:
        object_id = parse_object_id(account_id)
        if object_id is None:
            return False
        with store_errors("deleting user"):
            return self.collection.delete_one({"_id": object_id}).deleted_count == 1


class OrderStore:
    def __init__(self, collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        try:
            self.collection.create_index([("email", ASCENDING), ("createdAt", DESCENDING)])
            self.collection.create_index("status")
        except PyMongoError as exc:
            logger.warning("Unable to ensure indexes for orders: %s", exc)

    def insert(self, document: Dict) -> ObjectId:
        with store_errors("saving order"):
            return self.collection.insert_one(document).inserted_id

    def find(self, query: Dict, newest_first: bool = True) -> List[Dict]:
        direction = DESCENDING if newest_first else ASCENDING
        with store_errors("fetching orders"):
            cursor = self.collection.find(query).sort(
                [("createdAt", direction), ("_id", direction)]
            )
            return list(cursor)

    def get(self, order_id) -> Optional[Dict]:
        object_id = parse_object_id(order_id)
        if object_id is None:
            return None
        with store_errors("looking up order"):
            return self.collection.find_one({"_id": object_id})

    def set_status(self, order_id, status: str, from_statuses=None) -> Optional[Dict]:
        """Overwrite ``status``; with ``from_statuses`` only when the current one is listed."""
        object_id = parse_object_id(order_id)
        if object_id is None:
            return None
        query: Dict[str, object] = {"_id": object_id}
        if from_statuses is not None:
            query["status"] = {"$in": list(from_statuses)}
        with store_errors("updating order status"):
            return self.collection.find_one_and_update(
                query,
                {"$set": {"status": status}},
                return_document=ReturnDocument.AFTER,
            )


class Stores:
    def __init__(self, accounts: AccountStore, orders: OrderStore, clients=()):
        self.accounts = accounts
        self.orders = orders
        self.clients = list(clients)

    def close(self) -> None:
        for client in self.clients:
            client.close()
        self.clients = []


def _database(mongo: PyMongo, default_name: str):
    if mongo.db is not None:
        return mongo.db
    return mongo.cx.get_database(default_name)


def open_stores(app) -> Stores:
    """Connect to the account and order databases configured on ``app``."""
    auth_mongo = PyMongo(app, uri=app.config["MONGO_URI"])
    payment_mongo = PyMongo(app, uri=app.config["PAYMENT_DB_URI"])

    accounts = AccountStore(_database(auth_mongo, app.config["AUTH_DB_NAME"]).users)
    orders = OrderStore(
        _database(payment_mongo, app.config["PAYMENT_DB_NAME"]).paymentInfo
    )
    accounts.ensure_indexes()
    orders.ensure_indexes()
    return Stores(accounts, orders, clients=[auth_mongo.cx, payment_mongo.cx])
