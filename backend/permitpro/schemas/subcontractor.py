from permitpro.schemas.base import CamelModel


class SubcontractorCreate(CamelModel):
    company_name: str
    trade_type: str
    license_number: str | None = None
    address: str | None = None
    phone_number: str | None = None
    email: str | None = None
    contact_person: str | None = None


class SubcontractorUpdate(CamelModel):
    company_name: str | None = None
    trade_type: str | None = None
    license_number: str | None = None
    address: str | None = None
    phone_number: str | None = None
    email: str | None = None
    contact_person: str | None = None


class SubcontractorResponse(CamelModel):
    id: int
    company_name: str
    trade_type: str
    license_number: str | None
    address: str | None
    phone_number: str | None
    email: str | None
    contact_person: str | None
    created_at: str
    updated_at: str


class SubcontractorPackageSummary(CamelModel):
    package_id: int
    customer_name: str
    status: str
    contractor_name: str | None
    trade_type: str


class SubcontractorDetailResponse(SubcontractorResponse):
    packages: list[SubcontractorPackageSummary] = []


class AssignmentCreate(CamelModel):
    subcontractor_id: int
    trade_type: str | None = None


class AssignmentResponse(CamelModel):
    package_id: int
    subcontractor_id: int
    trade_type: str
    created_at: str
    subcontractor: SubcontractorResponse | None = None
