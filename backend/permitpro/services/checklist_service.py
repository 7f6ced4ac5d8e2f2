"""
County checklist templates and the per-package checklists seeded from them.

A template is keyed by (county, permit_type). The first package created for
a pair that has no template yet creates one from DEFAULT_CHECKLIST_ITEMS.
Two requests racing on that first creation are sorted out by the unique
constraint on checklist_templates: the loser gets a ConflictError from
create_template and resolve_template falls back to fetching the winner's row.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from permitpro.errors import ConflictError, NotFoundError, ValidationError
from permitpro.models.checklist import (
    ChecklistItem,
    ChecklistTemplate,
    PackageChecklist,
    PackageChecklistItem,
)
from permitpro.models.package import PERMIT_TYPES, Package
from permitpro.utils.timestamps import utc_timestamp

logger = logging.getLogger("permitpro.checklists")

DEFAULT_CHECKLIST_ITEMS: dict[str, list[str]] = {
    "Mobile Home Permit": [
        "Site Plan",
        "Foundation Design",
        "Manufacturer's Installation Instructions",
        "Electrical Permit",
        "Plumbing Permit",
        "HVAC Permit",
        "Soil Test Report",
        "Flood Zone Determination",
        "Property Survey",
        "Building Code Compliance Certificate",
    ],
    "Modular Home Permit": [
        "Site Plan",
        "Foundation Design",
        "Modular Unit Specifications",
        "Electrical Permit",
        "Plumbing Permit",
        "HVAC Permit",
        "Soil Test Report",
        "Flood Zone Determination",
        "Property Survey",
        "State Modular Program Approval",
        "Building Code Compliance Certificate",
    ],
    "Shed Permit": [
        "Site Plan",
        "Shed Design/Specifications",
        "Property Survey",
        "Flood Zone Determination",
        "Electrical Permit (if applicable)",
        "Plumbing Permit (if applicable)",
    ],
}


def validate_permit_type(permit_type: str) -> str:
    if permit_type not in PERMIT_TYPES:
        raise ValidationError(
            f"Invalid permit type. Must be one of: {', '.join(PERMIT_TYPES)}",
            details={"permitType": permit_type},
        )
    return permit_type


class ChecklistService:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def find_template(self, county: str, permit_type: str) -> ChecklistTemplate | None:
        return (
            self.db.query(ChecklistTemplate)
            .filter(ChecklistTemplate.county == county, ChecklistTemplate.permit_type == permit_type)
            .first()
        )

    def resolve_template(self, county: str, permit_type: str) -> ChecklistTemplate:
        """Return the template for (county, permit_type), creating it on first use."""
        county = (county or "").strip()
        validate_permit_type(permit_type)
        template = self.find_template(county, permit_type)
        if template:
            return template
        try:
            return self.create_template(county, permit_type)
        except ConflictError:
            template = self.find_template(county, permit_type)
            if template is None:
                raise
            return template

    def create_template(
        self,
        county: str,
        permit_type: str,
        items: list[str] | None = None,
    ) -> ChecklistTemplate:
        """Insert a template and its items in one commit.

        Raises ConflictError when the (county, permit_type) key is taken,
        whether by an earlier request or a concurrent one.
        """
        county = (county or "").strip()
        if not county:
            raise ValidationError("County is required")
        validate_permit_type(permit_type)

        names = items if items is not None else DEFAULT_CHECKLIST_ITEMS[permit_type]
        now = utc_timestamp()
        template = ChecklistTemplate(
            county=county,
            permit_type=permit_type,
            created_at=now,
            updated_at=now,
        )
        for index, name in enumerate(_dedupe(names)):
            template.items.append(
                ChecklistItem(name=name, is_required=True, is_custom=False, order=index)
            )
        self.db.add(template)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Checklist template already exists for %s / %s", county, permit_type)
            raise ConflictError(
                "Checklist template already exists for this county and permit type",
                details={"county": county, "permitType": permit_type},
            )
        self.db.refresh(template)
        logger.info("Created checklist template %s for %s / %s", template.id, county, permit_type)
        return template

    def list_templates(self, county: str | None = None, permit_type: str | None = None) -> list[ChecklistTemplate]:
        query = self.db.query(ChecklistTemplate)
        if county:
            query = query.filter(ChecklistTemplate.county == county)
        if permit_type:
            query = query.filter(ChecklistTemplate.permit_type == permit_type)
        return query.order_by(ChecklistTemplate.county, ChecklistTemplate.permit_type).all()

    def get_template(self, template_id: int) -> ChecklistTemplate:
        template = self.db.get(ChecklistTemplate, template_id)
        if not template:
            raise NotFoundError("Checklist template", template_id)
        return template

    def add_custom_item(self, template_id: int, name: str, is_required: bool = False) -> ChecklistItem:
        template = self.get_template(template_id)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Item name is required")
        if any(item.name == name for item in template.items):
            raise ConflictError("Checklist item already exists", details={"name": name})

        next_order = max((item.order for item in template.items), default=-1) + 1
        item = ChecklistItem(name=name, is_required=is_required, is_custom=True, order=next_order)
        template.items.append(item)
        template.updated_at = utc_timestamp()
        self.db.commit()
        self.db.refresh(item)
        return item

    def remove_custom_item(self, template_id: int, item_id: int) -> None:
        """Drop a custom item. Package checklists already seeded keep their copy."""
        template = self.get_template(template_id)
        item = next((i for i in template.items if i.id == item_id), None)
        if item is None:
            raise NotFoundError("Checklist item", item_id)
        if not item.is_custom:
            raise ValidationError("Only custom checklist items can be removed")
        template.items.remove(item)
        template.updated_at = utc_timestamp()
        self.db.commit()

    def reset_template(self, template_id: int) -> ChecklistTemplate:
        template = self.get_template(template_id)
        template.items.clear()
        # Flush the deletes first, the (template_id, name) unique key would
        # otherwise reject the re-inserted default names.
        self.db.flush()
        for index, name in enumerate(DEFAULT_CHECKLIST_ITEMS[template.permit_type]):
            template.items.append(
                ChecklistItem(name=name, is_required=True, is_custom=False, order=index)
            )
        template.updated_at = utc_timestamp()
        self.db.commit()
        self.db.refresh(template)
        logger.info("Reset checklist template %s to defaults", template.id)
        return template

    def export_template(self, template_id: int) -> dict:
        template = self.get_template(template_id)
        return {
            "county": template.county,
            "permitType": template.permit_type,
            "items": [i.name for i in template.items if not i.is_custom],
            "customItems": [i.name for i in template.items if i.is_custom],
            "exportDate": utc_timestamp(),
        }

    def import_template(
        self,
        county: str,
        permit_type: str,
        items: list[str],
        custom_items: list[str] | None = None,
    ) -> ChecklistTemplate:
        """Replace the items of (county, permit_type), creating the template if needed."""
        template = self.resolve_template(county, permit_type)
        template.items.clear()
        self.db.flush()

        custom_items = [n for n in _dedupe(custom_items or []) if n not in items]
        names = [(n, False) for n in _dedupe(items)] + [(n, True) for n in custom_items]
        for index, (name, is_custom) in enumerate(names):
            template.items.append(
                ChecklistItem(name=name, is_required=not is_custom, is_custom=is_custom, order=index)
            )
        template.updated_at = utc_timestamp()
        self.db.commit()
        self.db.refresh(template)
        logger.info("Imported %d checklist items into template %s", len(names), template.id)
        return template

    # ------------------------------------------------------------------
    # Package checklists
    # ------------------------------------------------------------------

    def instantiate_checklist(self, package: Package, template: ChecklistTemplate) -> PackageChecklist:
        """Attach a checklist mirroring ``template`` to ``package`` without committing."""
        checklist = PackageChecklist(template_id=template.id, created_at=utc_timestamp())
        for item in template.items:
            checklist.items.append(
                PackageChecklistItem(
                    template_item_id=item.id,
                    name=item.name,
                    is_required=item.is_required,
                    order=item.order,
                    is_completed=False,
                )
            )
        package.checklist = checklist
        return checklist

    def get_package_checklist(self, package_id: int) -> PackageChecklist:
        checklist = (
            self.db.query(PackageChecklist)
            .filter(PackageChecklist.package_id == package_id)
            .first()
        )
        if not checklist:
            if not self.db.get(Package, package_id):
                raise NotFoundError("Package", package_id)
            raise NotFoundError("Package checklist", package_id)
        return checklist

    def update_package_checklist(self, package_id: int, updates: list[dict]) -> PackageChecklist:
        """Apply ``{checklist_item_id, is_completed, notes, completed_by}`` updates.

        Keys left out of an update are not touched. All updates are applied
        in one commit; an unknown item id aborts the whole batch.
        """
        checklist = self.get_package_checklist(package_id)
        items_by_id = {item.id: item for item in checklist.items}
        now = utc_timestamp()

        for update in updates:
            item = items_by_id.get(update["checklist_item_id"])
            if item is None:
                self.db.rollback()
                raise NotFoundError("Checklist item", update["checklist_item_id"])

            if "notes" in update:
                item.notes = update["notes"]
            if "is_completed" in update and update["is_completed"] is not None:
                completed = bool(update["is_completed"])
                if completed and not item.is_completed:
                    item.completed_at = now
                if completed:
                    item.completed_by = update.get("completed_by") or item.completed_by
                else:
                    item.completed_at = None
                    item.completed_by = None
                item.is_completed = completed
            elif "completed_by" in update and item.is_completed:
                item.completed_by = update["completed_by"]

        checklist.package.updated_at = now
        self.db.commit()
        self.db.refresh(checklist)
        return checklist


def _dedupe(names: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for name in names:
        name = name.strip()
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result
