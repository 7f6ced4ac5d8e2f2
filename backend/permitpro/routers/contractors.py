from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from permitpro.database import get_db
from permitpro.dependencies import get_package_service
from permitpro.errors import ConflictError, NotFoundError, ValidationError
from permitpro.models.contractor import Contractor
from permitpro.schemas.base import MessageResponse
from permitpro.schemas.contractor import (
    ContractorCreate,
    ContractorResponse,
    ContractorUpdate,
    ReassignPackagesRequest,
    ReassignPackagesResponse,
)
from permitpro.serializers import contractor_to_response
from permitpro.services.package_service import PackageService
from permitpro.utils.timestamps import utc_timestamp

router = APIRouter(prefix="/contractors", tags=["contractors"])

REQUIRED_FIELDS = ("company_name", "license_number", "address", "phone_number")


def _commit_or_conflict(db: Session, license_number: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(
            "A contractor with this license number already exists",
            details={"licenseNumber": license_number},
        )


def _check_required(data: dict):
    for field in REQUIRED_FIELDS:
        if field in data and not (data[field] or "").strip():
            raise ValidationError(f"{field} is required", details={"field": field})


@router.get("", response_model=list[ContractorResponse])
async def list_contractors(db: Session = Depends(get_db)):
    contractors = (
        db.query(Contractor)
        .options(selectinload(Contractor.packages))
        .order_by(Contractor.company_name)
        .all()
    )
    return [contractor_to_response(c) for c in contractors]


@router.post("", response_model=ContractorResponse, status_code=201)
async def create_contractor(req: ContractorCreate, db: Session = Depends(get_db)):
    data = req.model_dump()
    _check_required(data)
    existing = db.query(Contractor).filter(Contractor.license_number == req.license_number).first()
    if existing:
        raise ConflictError(
            "A contractor with this license number already exists",
            details={"licenseNumber": req.license_number},
        )

    now = utc_timestamp()
    contractor = Contractor(**data, created_at=now, updated_at=now)
    db.add(contractor)
    _commit_or_conflict(db, req.license_number)
    db.refresh(contractor)
    return contractor_to_response(contractor)


@router.put("/{contractor_id}", response_model=ContractorResponse)
async def update_contractor(contractor_id: int, req: ContractorUpdate, db: Session = Depends(get_db)):
    contractor = db.get(Contractor, contractor_id)
    if not contractor:
        raise NotFoundError("Contractor", contractor_id)

    update_data = req.model_dump(exclude_unset=True)
    _check_required(update_data)
    for key, value in update_data.items():
        setattr(contractor, key, value)
    contractor.updated_at = utc_timestamp()
    _commit_or_conflict(db, update_data.get("license_number", contractor.license_number))
    db.refresh(contractor)
    return contractor_to_response(contractor)


@router.delete("/{contractor_id}", response_model=MessageResponse)
async def delete_contractor(contractor_id: int, packages: PackageService = Depends(get_package_service)):
    packages.delete_contractor(contractor_id)
    return MessageResponse(message="Contractor deleted successfully")


@router.put("/{contractor_id}/reassign-packages", response_model=ReassignPackagesResponse)
async def reassign_packages(
    contractor_id: int,
    req: ReassignPackagesRequest,
    packages: PackageService = Depends(get_package_service),
):
    count, new_contractor = packages.reassign_packages(contractor_id, req.new_contractor_id)
    return ReassignPackagesResponse(
        message=f"Successfully reassigned {count} package(s) to {new_contractor.company_name}",
        reassigned_count=count,
        new_contractor_name=new_contractor.company_name,
    )
