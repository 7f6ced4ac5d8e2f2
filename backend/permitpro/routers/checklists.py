from fastapi import APIRouter, Depends, Query

from permitpro.dependencies import get_checklist_service
from permitpro.schemas.base import MessageResponse
from permitpro.schemas.checklist import (
    ChecklistExport,
    ChecklistItemResponse,
    ChecklistTemplateCreate,
    ChecklistTemplateResponse,
    CustomItemCreate,
)
from permitpro.serializers import template_item_to_response, template_to_response
from permitpro.services.checklist_service import ChecklistService

router = APIRouter(prefix="/checklist-templates", tags=["checklists"])


@router.get("", response_model=list[ChecklistTemplateResponse])
async def list_templates(
    county: str | None = None,
    permit_type: str | None = Query(None, alias="permitType"),
    checklists: ChecklistService = Depends(get_checklist_service),
):
    return [template_to_response(t) for t in checklists.list_templates(county, permit_type)]


@router.post("", response_model=ChecklistTemplateResponse, status_code=201)
async def create_template(
    req: ChecklistTemplateCreate,
    checklists: ChecklistService = Depends(get_checklist_service),
):
    template = checklists.create_template(req.county, req.permit_type, items=req.items)
    return template_to_response(template)


@router.post("/import", response_model=ChecklistTemplateResponse)
async def import_template(
    req: ChecklistExport,
    checklists: ChecklistService = Depends(get_checklist_service),
):
    template = checklists.import_template(
        req.county,
        req.permit_type,
        items=req.items,
        custom_items=req.custom_items,
    )
    return template_to_response(template)


@router.get("/{template_id}", response_model=ChecklistTemplateResponse)
async def get_template(template_id: int, checklists: ChecklistService = Depends(get_checklist_service)):
    return template_to_response(checklists.get_template(template_id))


@router.post("/{template_id}/items", response_model=ChecklistItemResponse, status_code=201)
async def add_custom_item(
    template_id: int,
    req: CustomItemCreate,
    checklists: ChecklistService = Depends(get_checklist_service),
):
    item = checklists.add_custom_item(template_id, req.name, is_required=req.is_required)
    return template_item_to_response(item)


@router.delete("/{template_id}/items/{item_id}", response_model=MessageResponse)
async def remove_custom_item(
    template_id: int,
    item_id: int,
    checklists: ChecklistService = Depends(get_checklist_service),
):
    checklists.remove_custom_item(template_id, item_id)
    return MessageResponse(message="Checklist item removed")


@router.post("/{template_id}/reset", response_model=ChecklistTemplateResponse)
async def reset_template(template_id: int, checklists: ChecklistService = Depends(get_checklist_service)):
    return template_to_response(checklists.reset_template(template_id))


@router.get("/{template_id}/export", response_model=ChecklistExport)
async def export_template(template_id: int, checklists: ChecklistService = Depends(get_checklist_service)):
    return ChecklistExport(**checklists.export_template(template_id))
