from fastapi import APIRouter, Depends

from permitpro.dependencies import (
    get_assignment_service,
    get_checklist_service,
    get_package_service,
)
from permitpro.schemas.base import MessageResponse
from permitpro.schemas.checklist import PackageChecklistResponse, PackageChecklistUpdate
from permitpro.schemas.package import ContractorAssignment, PackageCreate, PackageResponse, PackageUpdate
from permitpro.schemas.subcontractor import AssignmentCreate, AssignmentResponse
from permitpro.serializers import assignment_to_response, checklist_to_response, package_to_response
from permitpro.services.assignment_service import AssignmentService
from permitpro.services.checklist_service import ChecklistService
from permitpro.services.package_service import PackageService

router = APIRouter(prefix="/permits", tags=["permits"])


@router.get("", response_model=list[PackageResponse])
async def list_packages(
    status: str | None = None,
    packages: PackageService = Depends(get_package_service),
):
    return [package_to_response(p) for p in packages.list_packages(status=status)]


@router.get("/{package_id}", response_model=PackageResponse)
async def get_package(package_id: int, packages: PackageService = Depends(get_package_service)):
    return package_to_response(packages.get_package(package_id))


@router.post("", response_model=PackageResponse, status_code=201)
async def create_package(req: PackageCreate, packages: PackageService = Depends(get_package_service)):
    package = packages.create_package(
        customer_name=req.customer_name,
        property_address=req.property_address,
        county=req.county,
        permit_type=req.permit_type,
        contractor_id=req.contractor_id,
        contractor_license=req.contractor_license,
    )
    return package_to_response(package)


@router.put("/{package_id}", response_model=PackageResponse)
async def update_package(
    package_id: int,
    req: PackageUpdate,
    packages: PackageService = Depends(get_package_service),
):
    update_data = req.model_dump(exclude_unset=True)
    if set(update_data) == {"status"}:
        package = packages.update_status(package_id, update_data["status"])
    else:
        package = packages.update_package(package_id, **update_data)
    return package_to_response(package)


@router.put("/{package_id}/contractor", response_model=PackageResponse)
async def assign_contractor(
    package_id: int,
    req: ContractorAssignment,
    packages: PackageService = Depends(get_package_service),
):
    package = packages.assign_contractor(
        package_id,
        contractor_id=req.contractor_id,
        contractor_license=req.contractor_license,
    )
    return package_to_response(package)


@router.get("/{package_id}/subcontractors", response_model=list[AssignmentResponse])
async def list_package_subcontractors(
    package_id: int,
    assignments: AssignmentService = Depends(get_assignment_service),
):
    return [assignment_to_response(a) for a in assignments.list_for_package(package_id)]


@router.post("/{package_id}/subcontractors", response_model=AssignmentResponse, status_code=201)
async def assign_subcontractor(
    package_id: int,
    req: AssignmentCreate,
    assignments: AssignmentService = Depends(get_assignment_service),
):
    assignment = assignments.assign(package_id, req.subcontractor_id, req.trade_type)
    return assignment_to_response(assignment)


@router.delete("/{package_id}/subcontractors/{subcontractor_id}", response_model=MessageResponse)
async def remove_subcontractor(
    package_id: int,
    subcontractor_id: int,
    assignments: AssignmentService = Depends(get_assignment_service),
):
    assignments.remove(package_id, subcontractor_id)
    return MessageResponse(message="Subcontractor removed from package")


@router.get("/{package_id}/checklist", response_model=PackageChecklistResponse)
async def get_checklist(package_id: int, checklists: ChecklistService = Depends(get_checklist_service)):
    return checklist_to_response(checklists.get_package_checklist(package_id))


@router.put("/{package_id}/checklist", response_model=PackageChecklistResponse)
async def update_checklist(
    package_id: int,
    req: PackageChecklistUpdate,
    checklists: ChecklistService = Depends(get_checklist_service),
):
    updates = [item.model_dump(exclude_unset=True) for item in req.items]
    return checklist_to_response(checklists.update_package_checklist(package_id, updates))
