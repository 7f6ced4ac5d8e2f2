import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from permitpro.errors import ConflictError, NotFoundError, ValidationError
from permitpro.models.package import Package
from permitpro.models.subcontractor import PackageSubcontractor, Subcontractor
from permitpro.utils.timestamps import utc_timestamp

logger = logging.getLogger("permitpro.assignments")


class AssignmentService:
    """Links subcontractors to packages, at most once per (package, subcontractor)."""

    def __init__(self, db: Session):
        self.db = db

    def _find(self, package_id: int, subcontractor_id: int) -> PackageSubcontractor | None:
        return self.db.get(PackageSubcontractor, (package_id, subcontractor_id))

    def list_for_package(self, package_id: int) -> list[PackageSubcontractor]:
        if not self.db.get(Package, package_id):
            raise NotFoundError("Package", package_id)
        return (
            self.db.query(PackageSubcontractor)
            .options(selectinload(PackageSubcontractor.subcontractor))
            .filter(PackageSubcontractor.package_id == package_id)
            .order_by(PackageSubcontractor.created_at, PackageSubcontractor.subcontractor_id)
            .all()
        )

    def assign(self, package_id: int, subcontractor_id: int, trade_type: str | None = None) -> PackageSubcontractor:
        if not self.db.get(Package, package_id):
            raise NotFoundError("Package", package_id)
        subcontractor = self.db.get(Subcontractor, subcontractor_id)
        if not subcontractor:
            raise NotFoundError("Subcontractor", subcontractor_id)

        duplicate = ConflictError(
            "Subcontractor is already assigned to this package",
            details={"packageId": package_id, "subcontractorId": subcontractor_id},
        )
        if self._find(package_id, subcontractor_id):
            raise duplicate

        trade_type = (trade_type or "").strip() or subcontractor.trade_type
        if not trade_type:
            raise ValidationError("Trade type is required")

        assignment = PackageSubcontractor(
            package_id=package_id,
            subcontractor_id=subcontractor_id,
            trade_type=trade_type,
            created_at=utc_timestamp(),
        )
        self.db.add(assignment)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against an identical assignment
            self.db.rollback()
            raise duplicate
        self.db.refresh(assignment)
        logger.info(
            "Assigned subcontractor %s to package %s as %s",
            subcontractor_id, package_id, trade_type,
        )
        return assignment

    def remove(self, package_id: int, subcontractor_id: int) -> None:
        assignment = self._find(package_id, subcontractor_id)
        if not assignment:
            raise NotFoundError("Subcontractor assignment", f"{package_id}/{subcontractor_id}")
        self.db.delete(assignment)
        self.db.commit()
        logger.info("Removed subcontractor %s from package %s", subcontractor_id, package_id)
