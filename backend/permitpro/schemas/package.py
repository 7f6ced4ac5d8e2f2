from pydantic import ConfigDict

from permitpro.schemas.base import CamelModel
from permitpro.schemas.checklist import PackageChecklistResponse
from permitpro.schemas.document import DocumentResponse
from permitpro.schemas.subcontractor import AssignmentResponse


class PackageCreate(CamelModel):
    customer_name: str
    property_address: str
    county: str
    permit_type: str
    contractor_id: int | None = None
    contractor_license: str | None = None


class PackageUpdate(CamelModel):
    model_config = ConfigDict(extra="forbid")

    customer_name: str | None = None
    property_address: str | None = None
    county: str | None = None
    permit_type: str | None = None
    status: str | None = None


class ContractorAssignment(CamelModel):
    contractor_id: int | None = None
    contractor_license: str | None = None


class PackageContractor(CamelModel):
    id: int
    company_name: str
    license_number: str
    address: str
    phone_number: str
    email: str | None
    contact_person: str | None


class PackageResponse(CamelModel):
    id: int
    customer_name: str
    property_address: str
    county: str
    permit_type: str
    status: str
    contractor_id: int | None
    contractor_license: str | None
    created_at: str
    updated_at: str
    contractor: PackageContractor | None = None
    documents: list[DocumentResponse] = []
    subcontractors: list[AssignmentResponse] = []
    checklist: PackageChecklistResponse | None = None
