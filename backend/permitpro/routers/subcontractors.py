from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, selectinload

from permitpro.database import get_db
from permitpro.errors import NotFoundError, ValidationError
from permitpro.models.package import Package
from permitpro.models.subcontractor import PackageSubcontractor, Subcontractor
from permitpro.schemas.base import MessageResponse
from permitpro.schemas.subcontractor import (
    SubcontractorCreate,
    SubcontractorDetailResponse,
    SubcontractorResponse,
    SubcontractorUpdate,
)
from permitpro.serializers import subcontractor_to_detail, subcontractor_to_response
from permitpro.utils.timestamps import utc_timestamp

router = APIRouter(prefix="/subcontractors", tags=["subcontractors"])

REQUIRED_FIELDS = ("company_name", "trade_type")


def _check_required(data: dict):
    for field in REQUIRED_FIELDS:
        if field in data and not (data[field] or "").strip():
            raise ValidationError(f"{field} is required", details={"field": field})


@router.get("", response_model=list[SubcontractorDetailResponse])
async def list_subcontractors(
    trade_type: str | None = Query(None, alias="tradeType"),
    db: Session = Depends(get_db),
):
    query = db.query(Subcontractor).options(
        selectinload(Subcontractor.assignments)
        .selectinload(PackageSubcontractor.package)
        .selectinload(Package.contractor)
    )
    if trade_type:
        query = query.filter(Subcontractor.trade_type == trade_type)
    return [subcontractor_to_detail(s) for s in query.order_by(Subcontractor.company_name).all()]


@router.post("", response_model=SubcontractorResponse, status_code=201)
async def create_subcontractor(req: SubcontractorCreate, db: Session = Depends(get_db)):
    data = req.model_dump()
    _check_required(data)
    now = utc_timestamp()
    subcontractor = Subcontractor(**data, created_at=now, updated_at=now)
    db.add(subcontractor)
    db.commit()
    db.refresh(subcontractor)
    return subcontractor_to_response(subcontractor)


@router.put("/{subcontractor_id}", response_model=SubcontractorResponse)
async def update_subcontractor(subcontractor_id: int, req: SubcontractorUpdate, db: Session = Depends(get_db)):
    subcontractor = db.get(Subcontractor, subcontractor_id)
    if not subcontractor:
        raise NotFoundError("Subcontractor", subcontractor_id)

    update_data = req.model_dump(exclude_unset=True)
    _check_required(update_data)
    for key, value in update_data.items():
        setattr(subcontractor, key, value)
    subcontractor.updated_at = utc_timestamp()
    db.commit()
    db.refresh(subcontractor)
    return subcontractor_to_response(subcontractor)


@router.delete("/{subcontractor_id}", response_model=MessageResponse)
async def delete_subcontractor(subcontractor_id: int, db: Session = Depends(get_db)):
    """Delete a subcontractor along with all of its package assignments."""
    subcontractor = db.get(Subcontractor, subcontractor_id)
    if not subcontractor:
        raise NotFoundError("Subcontractor", subcontractor_id)
    db.delete(subcontractor)
    db.commit()
    return MessageResponse(message="Subcontractor deleted successfully")
