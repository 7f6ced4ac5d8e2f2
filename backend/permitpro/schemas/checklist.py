from permitpro.schemas.base import CamelModel


class ChecklistItemResponse(CamelModel):
    id: int
    name: str
    is_required: bool
    is_custom: bool
    order: int


class ChecklistTemplateCreate(CamelModel):
    county: str
    permit_type: str
    items: list[str] | None = None


class ChecklistTemplateResponse(CamelModel):
    id: int
    county: str
    permit_type: str
    created_at: str
    updated_at: str
    items: list[ChecklistItemResponse]


class CustomItemCreate(CamelModel):
    name: str
    is_required: bool = False


class ChecklistExport(CamelModel):
    county: str
    permit_type: str
    items: list[str]
    custom_items: list[str] = []
    export_date: str | None = None


class PackageChecklistItemResponse(CamelModel):
    id: int
    template_item_id: int | None
    name: str
    is_required: bool
    order: int
    is_completed: bool
    completed_at: str | None
    completed_by: str | None
    notes: str | None


class PackageChecklistResponse(CamelModel):
    id: int
    package_id: int
    template_id: int | None
    created_at: str
    items: list[PackageChecklistItemResponse]


class ChecklistItemUpdate(CamelModel):
    checklist_item_id: int
    is_completed: bool | None = None
    notes: str | None = None
    completed_by: str | None = None


class PackageChecklistUpdate(CamelModel):
    items: list[ChecklistItemUpdate]
