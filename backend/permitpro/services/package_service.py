import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from permitpro.errors import ConflictError, NotFoundError, ValidationError
from permitpro.models.checklist import PackageChecklist
from permitpro.models.contractor import Contractor
from permitpro.models.package import PACKAGE_STATUSES, Package
from permitpro.models.subcontractor import PackageSubcontractor
from permitpro.services.checklist_service import ChecklistService, validate_permit_type
from permitpro.utils.timestamps import utc_timestamp

logger = logging.getLogger("permitpro.packages")

REQUIRED_FIELDS = {
    "customer_name": "Customer name",
    "property_address": "Property address",
    "county": "County",
    "permit_type": "Permit type",
}


def _validate_status(status: str) -> str:
    if status not in PACKAGE_STATUSES:
        raise ValidationError(
            f"Invalid status. Must be one of: {', '.join(PACKAGE_STATUSES)}",
            details={"status": status},
        )
    return status


class PackageService:
    """Package creation and updates, plus the contractor rules that hang off packages."""

    def __init__(self, db: Session, checklists: ChecklistService | None = None):
        self.db = db
        self.checklists = checklists or ChecklistService(db)

    def _query(self):
        return self.db.query(Package).options(
            selectinload(Package.documents),
            selectinload(Package.contractor),
            selectinload(Package.subcontractors).selectinload(PackageSubcontractor.subcontractor),
            selectinload(Package.checklist).selectinload(PackageChecklist.items),
        )

    def list_packages(self, status: str | None = None) -> list[Package]:
        query = self._query()
        if status:
            query = query.filter(Package.status == status)
        return query.order_by(Package.created_at.desc(), Package.id.desc()).all()

    def get_package(self, package_id: int) -> Package:
        package = self._query().filter(Package.id == package_id).first()
        if not package:
            raise NotFoundError("Package", package_id)
        return package

    def find_contractor(
        self,
        contractor_id: int | None = None,
        contractor_license: str | None = None,
    ) -> Contractor:
        """Look a contractor up by id, falling back to license number."""
        contractor = None
        if contractor_id is not None:
            contractor = self.db.get(Contractor, contractor_id)
        elif contractor_license:
            contractor = (
                self.db.query(Contractor)
                .filter(Contractor.license_number == contractor_license)
                .first()
            )
        else:
            raise ValidationError("A contractor id or license number is required")
        if not contractor:
            raise NotFoundError("Contractor", contractor_id if contractor_id is not None else contractor_license)
        return contractor

    def create_package(
        self,
        customer_name: str,
        property_address: str,
        county: str,
        permit_type: str,
        contractor_id: int | None = None,
        contractor_license: str | None = None,
    ) -> Package:
        values = {
            "customer_name": customer_name,
            "property_address": property_address,
            "county": county,
            "permit_type": permit_type,
        }
        for field, label in REQUIRED_FIELDS.items():
            values[field] = (values[field] or "").strip()
            if not values[field]:
                raise ValidationError(f"{label} is required", details={"field": field})
        validate_permit_type(values["permit_type"])

        contractor = None
        if contractor_id is not None or contractor_license:
            contractor = self.find_contractor(contractor_id, contractor_license)

        # The template may be committed on its own; package and checklist
        # below go in together or not at all.
        template = self.checklists.resolve_template(values["county"], values["permit_type"])

        now = utc_timestamp()
        package = Package(
            **values,
            status="Draft",
            contractor_id=contractor.id if contractor else None,
            created_at=now,
            updated_at=now,
        )
        self.checklists.instantiate_checklist(package, template)
        self.db.add(package)
        self.db.commit()
        logger.info(
            "Created package %s (%s, %s) with %d checklist items",
            package.id, values["permit_type"], values["county"], len(template.items),
        )
        return self.get_package(package.id)

    def update_package(self, package_id: int, **fields) -> Package:
        """Partial update. The checklist seeded at creation is left as is."""
        package = self.get_package(package_id)
        changes = {}
        for field, value in fields.items():
            if field in REQUIRED_FIELDS:
                value = (value or "").strip()
                if not value:
                    raise ValidationError(f"{REQUIRED_FIELDS[field]} is required", details={"field": field})
                if field == "permit_type":
                    validate_permit_type(value)
            elif field == "status":
                _validate_status(value)
            else:
                raise ValidationError(f"Unknown package field: {field}")
            changes[field] = value

        for field, value in changes.items():
            setattr(package, field, value)
        package.updated_at = utc_timestamp()
        self.db.commit()
        return self.get_package(package_id)

    def update_status(self, package_id: int, status: str) -> Package:
        # Any status may follow any other.
        _validate_status(status)
        package = self.get_package(package_id)
        previous = package.status
        package.status = status
        package.updated_at = utc_timestamp()
        self.db.commit()
        logger.info("Package %s status %s -> %s", package_id, previous, status)
        return self.get_package(package_id)

    def assign_contractor(
        self,
        package_id: int,
        contractor_id: int | None = None,
        contractor_license: str | None = None,
    ) -> Package:
        package = self.get_package(package_id)
        contractor = self.find_contractor(contractor_id, contractor_license)
        package.contractor_id = contractor.id
        package.updated_at = utc_timestamp()
        self.db.commit()
        return self.get_package(package_id)

    def delete_contractor(self, contractor_id: int) -> None:
        """Delete a contractor no package refers to.

        Raises ConflictError with ``packageCount`` and ``packages`` otherwise,
        so the caller can reassign them and try again.
        """
        contractor = self.db.get(Contractor, contractor_id)
        if not contractor:
            raise NotFoundError("Contractor", contractor_id)

        self._refuse_if_referenced(contractor_id)

        self.db.delete(contractor)
        try:
            self.db.commit()
        except IntegrityError:
            # A package was assigned after the check; the RESTRICT key caught it
            self.db.rollback()
            self._refuse_if_referenced(contractor_id)
            raise
        logger.info("Deleted contractor %s", contractor_id)

    def _refuse_if_referenced(self, contractor_id: int) -> None:
        referencing = (
            self.db.query(Package)
            .filter(Package.contractor_id == contractor_id)
            .order_by(Package.id)
            .all()
        )
        if not referencing:
            return
        logger.warning(
            "Refusing to delete contractor %s: %d package(s) assigned",
            contractor_id, len(referencing),
        )
        raise ConflictError(
            "Cannot delete contractor with assigned packages",
            details={
                "message": (
                    f"This contractor has {len(referencing)} package(s) assigned. "
                    "Please reassign or remove the packages first."
                ),
                "packageCount": len(referencing),
                "packages": [{"id": p.id, "customerName": p.customer_name} for p in referencing],
            },
        )

    def reassign_packages(self, old_contractor_id: int, new_contractor_id: int) -> tuple[int, Contractor]:
        """Move every package of one contractor to another. Returns (count, new contractor)."""
        if old_contractor_id == new_contractor_id:
            raise ValidationError("New contractor must differ from the current one")
        if not self.db.get(Contractor, old_contractor_id):
            raise NotFoundError("Contractor", old_contractor_id)
        new_contractor = self.db.get(Contractor, new_contractor_id)
        if not new_contractor:
            raise NotFoundError("New contractor", new_contractor_id)

        count = (
            self.db.query(Package)
            .filter(Package.contractor_id == old_contractor_id)
            .update(
                {Package.contractor_id: new_contractor_id, Package.updated_at: utc_timestamp()},
                synchronize_session="fetch",
            )
        )
        self.db.commit()
        logger.info(
            "Reassigned %d package(s) from contractor %s to %s",
            count, old_contractor_id, new_contractor_id,
        )
        return count, new_contractor
