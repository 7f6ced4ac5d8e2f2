from permitpro.models.user import User
from permitpro.models.contractor import Contractor
from permitpro.models.subcontractor import Subcontractor, PackageSubcontractor
from permitpro.models.package import Package, PERMIT_TYPES, PACKAGE_STATUSES
from permitpro.models.document import Document
from permitpro.models.checklist import (
    ChecklistTemplate,
    ChecklistItem,
    PackageChecklist,
    PackageChecklistItem,
)

__all__ = [
    "User",
    "Contractor",
    "Subcontractor",
    "PackageSubcontractor",
    "Package",
    "PERMIT_TYPES",
    "PACKAGE_STATUSES",
    "Document",
    "ChecklistTemplate",
    "ChecklistItem",
    "PackageChecklist",
    "PackageChecklistItem",
]
