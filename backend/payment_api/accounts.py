import logging
from typing import Dict, List, Optional

import bcrypt

from .errors import Conflict, InvalidInput, NotFound, Unauthorized
from .models import Account, public_account
from .stores import AccountStore

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of a password.
BCRYPT_MAX_PASSWORD_BYTES = 72


def encode_password(password) -> bytes:
    return str(password).encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


class CredentialService:
    """Registration and password checks over the account store.

    Login is stateless: nothing is issued on success, so callers
    re-send credentials whenever they need to prove who they are.
    """

    def __init__(self, store: AccountStore, rounds: int = 10):
        self.store = store
        self.rounds = rounds

    def hash_password(self, password: str) -> bytes:
        return bcrypt.hashpw(encode_password(password), bcrypt.gensalt(self.rounds))

    def register(self, email: Optional[str], phone: Optional[str], password: Optional[str]) -> Dict[str, str]:
        if not email or not phone or not password:
            raise InvalidInput("Email, phone, and password are required.")

        if self.store.find_by_email(email):
            raise Conflict("User already exists")

        account = Account(
            email=email, phone=phone, passwordHash=self.hash_password(password)
        )
        account_id = self.store.insert(account.to_document())
        logger.info("Registered account %s", account_id)
        return public_account(account.to_document())

    def login(self, email: Optional[str], password: Optional[str]) -> Dict[str, str]:
        if not email or not password:
            raise InvalidInput("Email and password are required.")

        account = self.store.find_by_email(email)
        if not account:
            raise NotFound("User not found", status_code=400)

        stored_hash = account.get("passwordHash")
        if isinstance(stored_hash, str):
            stored_hash = stored_hash.encode("utf-8")
        if not stored_hash or not bcrypt.checkpw(encode_password(password), stored_hash):
            raise Unauthorized("Incorrect password")

        return public_account(account)


class AdminAccountService:
    def __init__(self, store: AccountStore):
        self.store = store

    def list_accounts(self) -> List[Dict[str, str]]:
        return [public_account(document) for document in self.store.list_all()]

    def delete_account(self, account_id: str) -> None:
        if not self.store.delete_by_id(account_id):
            raise NotFound("User not found")
        logger.info("Deleted account %s", account_id)
