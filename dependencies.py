from typing import Optional

from fastapi import HTTPException, Request

from errors import ServiceError
from modules.accounts.service import AccountService
from modules.employee_management.service import EmployeeService


def get_employee_service(request: Request) -> EmployeeService:
    return request.app.state.employee_service


def get_account_service(request: Request) -> AccountService:
    return request.app.state.account_service


def raise_for_error(err: Optional[ServiceError]) -> None:
    if err:
        raise HTTPException(status_code=err.status_code, detail=err.to_dict())
