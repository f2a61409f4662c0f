from typing import Any, Dict, Optional

EMPLOYEE_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "gender",
    "designation",
    "salary",
    "date_of_joining",
    "department",
    "employee_photo",
)

DELETED_MESSAGE = "Employee deleted successfully."


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_employee_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize the supplied employee fields for storage.
    Strings are trimmed, email is lower-cased and salary stored as a number.
    Fields that are absent or None are left out.
    """
    normalized = {}
    for field in EMPLOYEE_FIELDS:
        value = data.get(field)
        if value is None:
            continue
        if field == "email":
            value = normalize_email(value)
        elif field == "salary":
            value = float(value)
        elif isinstance(value, str):
            value = value.strip()
        normalized[field] = value
    return normalized


def prepare_employee_document(
    first_name: str,
    last_name: str,
    email: str,
    designation: str,
    salary: float,
    date_of_joining: str,
    department: str,
    gender: Optional[str] = None,
    employee_photo: Optional[str] = None,
) -> dict:
    """
    Prepare an employee document for MongoDB insertion.
    Timestamps are added by the store.
    """
    employee_doc = normalize_employee_fields({
        "first_name": first_name,
        "last_name": last_name,
        "email": email,
        "gender": gender,
        "designation": designation,
        "salary": salary,
        "date_of_joining": date_of_joining,
        "department": department,
    })
    employee_doc["gender"] = employee_doc.get("gender")
    employee_doc["employee_photo"] = employee_photo
    return employee_doc


def serialize_employee(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "first_name": doc.get("first_name"),
        "last_name": doc.get("last_name"),
        "email": doc.get("email"),
        "gender": doc.get("gender"),
        "designation": doc.get("designation"),
        "salary": doc.get("salary"),
        "date_of_joining": doc.get("date_of_joining"),
        "department": doc.get("department"),
        "employee_photo": doc.get("employee_photo"),
        "created_at": doc.get("created_at"),
        "updated_at": doc.get("updated_at"),
    }
