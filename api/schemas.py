"""
api.schemas
===========

Request bodies accepted by the HTTP layer.  Each model is dumped to a plain
dict for the tenant store: creates with ``exclude_none``, updates through
:meth:`EmployeeUpdate.changes`.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from visatrack.models import AlertStatus, AlertType, EmployeeStatus, VisaStatus

REQUIRED_EMPLOYEE_FIELDS = ("first_name", "last_name", "status")


class ProvisionRequest(BaseModel):
    company_name: str = Field(..., min_length=1, description="Legal name of the employer")
    email: Optional[str] = None
    full_name: Optional[str] = None


class EmployeeCreate(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    nationality: Optional[str] = None
    passport_number: Optional[str] = None
    passport_expiry: Optional[date] = None
    position: Optional[str] = None
    department: Optional[str] = None
    employment_start_date: Optional[date] = None
    notes: Optional[str] = None


class EmployeeUpdate(BaseModel):
    """Partial update; only fields present in the body are changed."""
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    nationality: Optional[str] = None
    passport_number: Optional[str] = None
    passport_expiry: Optional[date] = None
    position: Optional[str] = None
    department: Optional[str] = None
    employment_start_date: Optional[date] = None
    status: Optional[EmployeeStatus] = None
    notes: Optional[str] = None

    def changes(self) -> dict:
        """
        Fields sent in the body.  An explicit ``null`` clears an optional
        field; the name and status columns cannot be cleared and are skipped.
        """
        data = self.model_dump(exclude_unset=True)
        for name in REQUIRED_EMPLOYEE_FIELDS:
            if data.get(name, "") is None:
                del data[name]
        return data


class VisaCreate(BaseModel):
    employee_id: str
    visa_type: str = Field(..., min_length=1)
    permit_number: Optional[str] = None
    issue_date: date
    expiry_date: date
    country_issued: Optional[str] = None
    status: Optional[VisaStatus] = None
    application_status: Optional[str] = None


class AlertCreate(BaseModel):
    title: str = Field(..., min_length=1)
    employee_id: Optional[str] = None
    alert_type: AlertType = AlertType.EXPIRY
    description: Optional[str] = None
    due_date: Optional[date] = None


class AlertStatusUpdate(BaseModel):
    status: AlertStatus
