import logging
import re
from typing import Any, Dict, Optional, Tuple

from bson import ObjectId
from pymongo.errors import PyMongoError

from errors import (
    EMAIL_EXISTS,
    EMPLOYEE_NOT_FOUND,
    INVALID_EMPLOYEE_ID,
    ServiceError,
    internal_error,
    invalid_input,
    not_found,
)
from photo_upload import PhotoUploadAdapter
from store import DocumentStore
from validators import validate
from .models import (
    DELETED_MESSAGE,
    EMPLOYEE_FIELDS,
    normalize_email,
    normalize_employee_fields,
    prepare_employee_document,
    serialize_employee,
)

logger = logging.getLogger(__name__)

Result = Tuple[Any, Optional[ServiceError]]


def _contains(value: str) -> dict:
    return {"$regex": re.escape(value.strip()), "$options": "i"}


def _storage_error(action: str, error: PyMongoError) -> ServiceError:
    logger.error("Storage failure while %s: %s", action, error)
    return internal_error(f"Error {action}.", details=str(error))


class EmployeeService:
    """Employee directory operations over the ``employees`` collection"""

    def __init__(self, store: DocumentStore, uploader: PhotoUploadAdapter):
        self.store = store
        self.uploader = uploader

    async def list_employees(self) -> Result:
        try:
            employees = await self.store.find({})
        except PyMongoError as e:
            return None, _storage_error("listing employees", e)
        return [serialize_employee(emp) for emp in employees], None

    async def get_employee(self, eid: str) -> Result:
        if not self.store.is_valid_id(eid):
            return None, invalid_input(INVALID_EMPLOYEE_ID)
        try:
            employee = await self.store.find_by_id(eid)
        except PyMongoError as e:
            return None, _storage_error("fetching employee", e)
        if not employee:
            return None, not_found(EMPLOYEE_NOT_FOUND)
        return serialize_employee(employee), None

    async def search_employees(
        self, designation: Optional[str] = None, department: Optional[str] = None
    ) -> Result:
        query = {}
        if designation and designation.strip():
            query["designation"] = _contains(designation)
        if department and department.strip():
            query["department"] = _contains(department)
        if not query:
            return None, invalid_input("Provide at least one filter: designation or department.")
        try:
            employees = await self.store.find(query)
        except PyMongoError as e:
            return None, _storage_error("searching employees", e)
        return [serialize_employee(emp) for emp in employees], None

    async def create_employee(self, data: Dict[str, Any]) -> Result:
        err = validate("addEmployee", data)
        if err:
            return None, err

        email = normalize_email(data["email"])
        try:
            if await self.store.find_one({"email": email}):
                return None, invalid_input(EMAIL_EXISTS)
        except PyMongoError as e:
            return None, _storage_error("creating employee", e)

        photo_url, err = await self.uploader.upload(data.get("employee_photo"))
        if err:
            return None, err

        employee_doc = prepare_employee_document(
            first_name=data["first_name"],
            last_name=data["last_name"],
            email=email,
            gender=data.get("gender"),
            designation=data["designation"],
            salary=data["salary"],
            date_of_joining=data["date_of_joining"],
            department=data["department"],
            employee_photo=photo_url,
        )
        try:
            created = await self.store.create(employee_doc)
        except PyMongoError as e:
            if self.store.is_duplicate_key(e, "email"):
                return None, invalid_input(EMAIL_EXISTS)
            return None, _storage_error("creating employee", e)

        logger.info("Employee %s created", created["_id"])
        return serialize_employee(created), None

    async def update_employee(self, eid: str, data: Dict[str, Any]) -> Result:
        supplied = {
            field: data[field]
            for field in EMPLOYEE_FIELDS
            if data.get(field) is not None
        }
        err = validate("updateEmployee", {"eid": eid, **supplied})
        if err:
            return None, err
        if not self.store.is_valid_id(eid):
            return None, invalid_input(INVALID_EMPLOYEE_ID)

        updates = normalize_employee_fields(supplied)
        try:
            # Nothing is uploaded for a record that does not exist
            if not await self.store.find_by_id(eid):
                return None, not_found(EMPLOYEE_NOT_FOUND)
            if "email" in updates:
                existing = await self.store.find_one({
                    "_id": {"$ne": ObjectId(eid)},
                    "email": updates["email"],
                })
                if existing:
                    return None, invalid_input(EMAIL_EXISTS)
        except PyMongoError as e:
            return None, _storage_error("updating employee", e)

        if "employee_photo" in updates:
            photo_url, err = await self.uploader.upload(updates["employee_photo"])
            if err:
                return None, err
            updates["employee_photo"] = photo_url

        try:
            updated = await self.store.find_by_id_and_update(eid, updates)
        except PyMongoError as e:
            if self.store.is_duplicate_key(e, "email"):
                return None, invalid_input(EMAIL_EXISTS)
            return None, _storage_error("updating employee", e)

        if not updated:
            return None, not_found(EMPLOYEE_NOT_FOUND)
        logger.info("Employee %s updated (%s)", eid, ", ".join(sorted(updates)))
        return serialize_employee(updated), None

    async def delete_employee(self, eid: str) -> Result:
        if not self.store.is_valid_id(eid):
            return None, invalid_input(INVALID_EMPLOYEE_ID)
        try:
            deleted = await self.store.find_by_id_and_delete(eid)
        except PyMongoError as e:
            return None, _storage_error("deleting employee", e)
        if not deleted:
            return None, not_found(EMPLOYEE_NOT_FOUND)
        logger.info("Employee %s deleted", eid)
        return DELETED_MESSAGE, None
