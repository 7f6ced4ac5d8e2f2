from permitpro.models.checklist import (
    ChecklistItem,
    ChecklistTemplate,
    PackageChecklist,
    PackageChecklistItem,
)
from permitpro.models.contractor import Contractor
from permitpro.models.document import Document
from permitpro.models.package import Package
from permitpro.models.subcontractor import PackageSubcontractor, Subcontractor
from permitpro.schemas.checklist import (
    ChecklistItemResponse,
    ChecklistTemplateResponse,
    PackageChecklistItemResponse,
    PackageChecklistResponse,
)
from permitpro.schemas.contractor import ContractorPackageSummary, ContractorResponse
from permitpro.schemas.document import DocumentResponse
from permitpro.schemas.package import PackageContractor, PackageResponse
from permitpro.schemas.subcontractor import (
    AssignmentResponse,
    SubcontractorDetailResponse,
    SubcontractorPackageSummary,
    SubcontractorResponse,
)


def document_to_response(doc: Document) -> DocumentResponse:
    return DocumentResponse(
        id=doc.id,
        package_id=doc.package_id,
        file_name=doc.file_name,
        file_path=doc.file_path,
        version=doc.version,
        uploader_name=doc.uploader_name,
        created_at=doc.created_at,
    )


def subcontractor_to_response(sub: Subcontractor) -> SubcontractorResponse:
    return SubcontractorResponse(
        id=sub.id,
        company_name=sub.company_name,
        trade_type=sub.trade_type,
        license_number=sub.license_number,
        address=sub.address,
        phone_number=sub.phone_number,
        email=sub.email,
        contact_person=sub.contact_person,
        created_at=sub.created_at,
        updated_at=sub.updated_at,
    )


def subcontractor_to_detail(sub: Subcontractor) -> SubcontractorDetailResponse:
    packages = [
        SubcontractorPackageSummary(
            package_id=a.package_id,
            customer_name=a.package.customer_name,
            status=a.package.status,
            contractor_name=a.package.contractor.company_name if a.package.contractor else None,
            trade_type=a.trade_type,
        )
        for a in sub.assignments
    ]
    return SubcontractorDetailResponse(
        **subcontractor_to_response(sub).model_dump(),
        packages=packages,
    )


def assignment_to_response(assignment: PackageSubcontractor) -> AssignmentResponse:
    return AssignmentResponse(
        package_id=assignment.package_id,
        subcontractor_id=assignment.subcontractor_id,
        trade_type=assignment.trade_type,
        created_at=assignment.created_at,
        subcontractor=subcontractor_to_response(assignment.subcontractor),
    )


def contractor_to_response(contractor: Contractor) -> ContractorResponse:
    return ContractorResponse(
        id=contractor.id,
        company_name=contractor.company_name,
        license_number=contractor.license_number,
        address=contractor.address,
        phone_number=contractor.phone_number,
        email=contractor.email,
        contact_person=contractor.contact_person,
        created_at=contractor.created_at,
        updated_at=contractor.updated_at,
        packages=[
            ContractorPackageSummary(id=p.id, customer_name=p.customer_name, status=p.status)
            for p in sorted(contractor.packages, key=lambda p: p.id)
        ],
    )


def template_item_to_response(item: ChecklistItem) -> ChecklistItemResponse:
    return ChecklistItemResponse(
        id=item.id,
        name=item.name,
        is_required=item.is_required,
        is_custom=item.is_custom,
        order=item.order,
    )


def template_to_response(template: ChecklistTemplate) -> ChecklistTemplateResponse:
    return ChecklistTemplateResponse(
        id=template.id,
        county=template.county,
        permit_type=template.permit_type,
        created_at=template.created_at,
        updated_at=template.updated_at,
        items=[template_item_to_response(i) for i in template.items],
    )


def _checklist_item_to_response(item: PackageChecklistItem) -> PackageChecklistItemResponse:
    return PackageChecklistItemResponse(
        id=item.id,
        template_item_id=item.template_item_id,
        name=item.name,
        is_required=item.is_required,
        order=item.order,
        is_completed=item.is_completed,
        completed_at=item.completed_at,
        completed_by=item.completed_by,
        notes=item.notes,
    )


def checklist_to_response(checklist: PackageChecklist) -> PackageChecklistResponse:
    return PackageChecklistResponse(
        id=checklist.id,
        package_id=checklist.package_id,
        template_id=checklist.template_id,
        created_at=checklist.created_at,
        items=[_checklist_item_to_response(i) for i in checklist.items],
    )


def package_to_response(package: Package) -> PackageResponse:
    contractor = package.contractor
    return PackageResponse(
        id=package.id,
        customer_name=package.customer_name,
        property_address=package.property_address,
        county=package.county,
        permit_type=package.permit_type,
        status=package.status,
        contractor_id=package.contractor_id,
        contractor_license=contractor.license_number if contractor else None,
        created_at=package.created_at,
        updated_at=package.updated_at,
        contractor=PackageContractor(
            id=contractor.id,
            company_name=contractor.company_name,
            license_number=contractor.license_number,
            address=contractor.address,
            phone_number=contractor.phone_number,
            email=contractor.email,
            contact_person=contractor.contact_person,
        ) if contractor else None,
        documents=[document_to_response(d) for d in package.documents],
        subcontractors=[assignment_to_response(a) for a in package.subcontractors],
        checklist=checklist_to_response(package.checklist) if package.checklist else None,
    )
