"""
Account Service
Signup and login on top of the ``users`` collection
"""

import logging
from typing import Any, Optional, Tuple

from pymongo.errors import PyMongoError

from errors import EMAIL_EXISTS, ServiceError, internal_error, invalid_input, unauthenticated
from security import CredentialService
from store import DocumentStore
from validators import validate
from modules.employee_management.models import normalize_email
from .models import prepare_user_document, serialize_user

logger = logging.getLogger(__name__)


class AccountService:
    """Service class for account signup and login"""

    def __init__(self, store: DocumentStore, credentials: CredentialService):
        self.store = store
        self.credentials = credentials

    async def signup(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> Tuple[Any, Optional[ServiceError]]:
        """
        Create a new account.

        Returns:
            (account, None) on success, the account never carries the password hash
            (None, error) when validation fails or the email is already registered
        """
        err = validate("signup", {"username": username, "email": email, "password": password})
        if err:
            return None, err

        try:
            if await self.store.find_one({"email": normalize_email(email)}):
                return None, invalid_input(EMAIL_EXISTS)

            password_hash = await self.credentials.hash_password(password)
            user = await self.store.create(prepare_user_document(username, email, password_hash))
        except PyMongoError as e:
            # Unique index caught a signup racing this one past the check above
            if self.store.is_duplicate_key(e, "email"):
                return None, invalid_input(EMAIL_EXISTS)
            logger.error("Storage failure during signup: %s", e)
            return None, internal_error("Error creating account.", details=str(e))

        logger.info("Account %s created", user["_id"])
        return serialize_user(user), None

    async def login(
        self,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Tuple[Optional[str], Optional[ServiceError]]:
        """
        Authenticate by username (preferred) or email and issue a bearer token.
        Unknown accounts and wrong passwords produce the same error.
        """
        err = validate("login", {"password": password})
        if err:
            return None, err

        if not username and not email:
            return None, invalid_input("Either username or email is required for login.")

        query = {"username": username} if username else {"email": normalize_email(email)}
        try:
            user = await self.store.find_one(query)
        except PyMongoError as e:
            logger.error("Storage failure during login: %s", e)
            return None, internal_error("Error during login.", details=str(e))

        if not user or not await self.credentials.verify_password(password, user.get("password", "")):
            logger.info("Rejected login attempt")
            return None, unauthenticated()

        token, err = self.credentials.issue_token(user["_id"], user["username"], user["email"])
        if err:
            logger.error("Cannot issue token: %s", err.message)
            return None, err
        return token, None
