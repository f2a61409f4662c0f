from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, Union

# Request models stay permissive on purpose: field rules live in validators.py
# so every operation reports violations through the same error shape.

class EmployeeCreate(BaseModel):
	first_name: Optional[str] = Field(None, description="First name")
	last_name: Optional[str] = Field(None, description="Last name")
	email: Optional[str] = Field(None, description="Employee email")
	gender: Optional[str] = Field(None, description="Gender")
	designation: Optional[str] = Field(None, description="Job title")
	salary: Optional[Union[float, str]] = Field(None, description="Salary amount (minimum 1000)")
	date_of_joining: Optional[str] = Field(None, description="Joining date (YYYY-MM-DD)")
	department: Optional[str] = Field(None, description="Department name")
	employee_photo: Optional[str] = Field(None, description="Photo URL or base64 image data")

class EmployeeUpdate(EmployeeCreate):
	pass

class EmployeeResponse(BaseModel):
	id: str = Field(..., description="MongoDB Object ID")
	first_name: str = Field(..., description="First name")
	last_name: str = Field(..., description="Last name")
	email: str = Field(..., description="Employee email")
	gender: Optional[str] = Field(None, description="Gender")
	designation: str = Field(..., description="Job title")
	salary: float = Field(..., description="Salary amount")
	date_of_joining: str = Field(..., description="Joining date")
	department: str = Field(..., description="Department name")
	employee_photo: Optional[str] = Field(None, description="Photo URL")
	created_at: Optional[datetime] = Field(None, description="Created at")
	updated_at: Optional[datetime] = Field(None, description="Updated at")

class MessageResponse(BaseModel):
	message: str
