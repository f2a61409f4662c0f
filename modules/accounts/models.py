from modules.employee_management.models import normalize_email


def prepare_user_document(username: str, email: str, password_hash: str) -> dict:
    """
    Prepare a user document for MongoDB insertion.
    ``password_hash`` must already be a bcrypt hash.
    """
    return {
        "username": username,
        "email": normalize_email(email),
        "password": password_hash,
    }


def serialize_user(doc: dict) -> dict:
    # The password hash never leaves this module
    return {
        "id": str(doc["_id"]),
        "username": doc.get("username"),
        "email": doc.get("email"),
        "created_at": doc.get("created_at"),
        "updated_at": doc.get("updated_at"),
    }
