"""
Shared fixtures.

``InMemoryStore`` implements ``DocumentStore`` for the filter shapes the
services emit (equality, ``$ne`` and case-insensitive ``$regex``) and enforces
unique fields by raising pymongo's ``DuplicateKeyError`` like a unique index.
"""

import asyncio
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from jose import jwt
from pymongo.errors import DuplicateKeyError

from config import Settings
from modules.accounts.service import AccountService
from modules.employee_management.service import EmployeeService
from photo_upload import ImageHostError, PhotoUploadAdapter
from security import CredentialService
from store import NEWEST_FIRST, DocumentStore

PHOTO_FOLDER = "employee-management/employees"


def _matches(doc: dict, filter: Dict[str, Any]) -> bool:
    for field, expected in filter.items():
        actual = doc.get(field)
        if isinstance(expected, dict) and "$ne" in expected:
            if actual == expected["$ne"]:
                return False
        elif isinstance(expected, dict) and "$regex" in expected:
            flags = re.IGNORECASE if "i" in expected.get("$options", "") else 0
            if not isinstance(actual, str) or not re.search(expected["$regex"], actual, flags):
                return False
        elif actual != expected:
            return False
    return True


class InMemoryStore(DocumentStore):
    def __init__(self, unique_fields=("email",)):
        self.docs: Dict[ObjectId, dict] = {}
        self.unique_fields = unique_fields
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _check_unique(self, doc: dict, exclude: Optional[ObjectId] = None) -> None:
        for field in self.unique_fields:
            for other in self.docs.values():
                if other["_id"] != exclude and field in doc and other.get(field) == doc[field]:
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error index: {field}_1 dup key",
                        11000,
                        {"keyPattern": {field: 1}, "keyValue": {field: doc[field]}},
                    )

    async def find_one(self, filter: Dict[str, Any]) -> Optional[dict]:
        await asyncio.sleep(0)
        for doc in self.docs.values():
            if _matches(doc, filter):
                return dict(doc)
        return None

    async def find_by_id(self, id: str) -> Optional[dict]:
        await asyncio.sleep(0)
        doc = self.docs.get(ObjectId(id))
        return dict(doc) if doc else None

    async def find(self, filter: Dict[str, Any], sort=NEWEST_FIRST) -> List[dict]:
        await asyncio.sleep(0)
        found = [dict(doc) for doc in self.docs.values() if _matches(doc, filter)]
        for field, direction in reversed(list(sort)):
            found.sort(key=lambda doc: doc[field], reverse=direction < 0)
        return found

    async def create(self, doc: Dict[str, Any]) -> dict:
        await asyncio.sleep(0)
        self._check_unique(doc)
        now = self._tick()
        document = {**doc, "_id": ObjectId(), "created_at": now, "updated_at": now}
        self.docs[document["_id"]] = document
        return dict(document)

    async def find_by_id_and_update(self, id: str, patch: Dict[str, Any]) -> Optional[dict]:
        await asyncio.sleep(0)
        oid = ObjectId(id)
        if oid not in self.docs:
            return None
        self._check_unique(patch, exclude=oid)
        self.docs[oid].update(patch, updated_at=self._tick())
        return dict(self.docs[oid])

    async def find_by_id_and_delete(self, id: str) -> Optional[dict]:
        await asyncio.sleep(0)
        return self.docs.pop(ObjectId(id), None)


class FakeImageHost:
    def __init__(self, url: str = "https://res.cloudinary.com/demo/image/upload/v1/photo.jpg"):
        self.url = url
        self.error: Optional[Exception] = None
        self.calls = []

    async def upload(self, payload: str, target_path: str) -> str:
        self.calls.append((payload, target_path))
        if self.error:
            raise self.error
        return self.url


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        CLOUDINARY_CLOUD_NAME="demo",
        CLOUDINARY_API_KEY="123456",
        CLOUDINARY_API_SECRET="shh",
    )


@pytest.fixture
def credentials(settings) -> CredentialService:
    return CredentialService(settings)


@pytest.fixture
def decode_claims(settings):
    def decode(token: str) -> dict:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    return decode


@pytest.fixture
def image_host() -> FakeImageHost:
    return FakeImageHost()


@pytest.fixture
def failing_image_host() -> FakeImageHost:
    host = FakeImageHost()
    host.error = ImageHostError("Invalid image file")
    return host


@pytest.fixture
def uploader(image_host) -> PhotoUploadAdapter:
    return PhotoUploadAdapter(image_host, PHOTO_FOLDER)


@pytest.fixture
def employee_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def user_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def employee_service(employee_store, uploader) -> EmployeeService:
    return EmployeeService(employee_store, uploader)


@pytest.fixture
def account_service(user_store, credentials) -> AccountService:
    return AccountService(user_store, credentials)


@pytest.fixture
def employee_payload() -> dict:
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "Ada.Lovelace@Example.com",
        "gender": "Female",
        "designation": "Software Engineer",
        "salary": 5000,
        "date_of_joining": "2024-03-01",
        "department": "Engineering",
    }
