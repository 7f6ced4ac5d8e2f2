from fastapi import Depends
from sqlalchemy.orm import Session

from permitpro.database import get_db
from permitpro.services.assignment_service import AssignmentService
from permitpro.services.checklist_service import ChecklistService
from permitpro.services.document_service import DocumentService
from permitpro.services.package_service import PackageService


def get_checklist_service(db: Session = Depends(get_db)) -> ChecklistService:
    return ChecklistService(db)


def get_package_service(
    db: Session = Depends(get_db),
    checklists: ChecklistService = Depends(get_checklist_service),
) -> PackageService:
    return PackageService(db, checklists)


def get_document_service(db: Session = Depends(get_db)) -> DocumentService:
    return DocumentService(db)


def get_assignment_service(db: Session = Depends(get_db)) -> AssignmentService:
    return AssignmentService(db)
