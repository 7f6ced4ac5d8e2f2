from permitpro.schemas.base import CamelModel


class ContractorCreate(CamelModel):
    company_name: str
    license_number: str
    address: str
    phone_number: str
    email: str | None = None
    contact_person: str | None = None


class ContractorUpdate(CamelModel):
    company_name: str | None = None
    license_number: str | None = None
    address: str | None = None
    phone_number: str | None = None
    email: str | None = None
    contact_person: str | None = None


class ContractorPackageSummary(CamelModel):
    id: int
    customer_name: str
    status: str


class ContractorResponse(CamelModel):
    id: int
    company_name: str
    license_number: str
    address: str
    phone_number: str
    email: str | None
    contact_person: str | None
    created_at: str
    updated_at: str
    packages: list[ContractorPackageSummary] = []


class ReassignPackagesRequest(CamelModel):
    new_contractor_id: int


class ReassignPackagesResponse(CamelModel):
    message: str
    reassigned_count: int
    new_contractor_name: str
