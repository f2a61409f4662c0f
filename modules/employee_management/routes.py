from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from .schemas import EmployeeCreate, EmployeeUpdate, EmployeeResponse, MessageResponse
from .service import EmployeeService

from dependencies import get_employee_service, raise_for_error

router = APIRouter(prefix="/employees", tags=["Employee Management"])

@router.get("", response_model=List[EmployeeResponse])
async def get_employees(service: EmployeeService = Depends(get_employee_service)):
	employees, err = await service.list_employees()
	raise_for_error(err)
	return employees

# Declared before /{eid} so "search" is not taken for an identifier
@router.get("/search", response_model=List[EmployeeResponse])
async def search_employee(
	designation: Optional[str] = Query(None),
	department: Optional[str] = Query(None),
	service: EmployeeService = Depends(get_employee_service)
):
	employees, err = await service.search_employees(designation=designation, department=department)
	raise_for_error(err)
	return employees

@router.get("/{eid}", response_model=EmployeeResponse)
async def get_employee_by_id(eid: str, service: EmployeeService = Depends(get_employee_service)):
	employee, err = await service.get_employee(eid)
	raise_for_error(err)
	return employee

@router.post("", response_model=EmployeeResponse, status_code=201)
async def add_employee(employee: EmployeeCreate, service: EmployeeService = Depends(get_employee_service)):
	created, err = await service.create_employee(employee.model_dump())
	raise_for_error(err)
	return created

@router.put("/{eid}", response_model=EmployeeResponse)
async def update_employee(eid: str, employee: EmployeeUpdate, service: EmployeeService = Depends(get_employee_service)):
	updated, err = await service.update_employee(eid, employee.model_dump(exclude_unset=True))
	raise_for_error(err)
	return updated

@router.delete("/{eid}", response_model=MessageResponse)
async def delete_employee(eid: str, service: EmployeeService = Depends(get_employee_service)):
	message, err = await service.delete_employee(eid)
	raise_for_error(err)
	return {"message": message}
