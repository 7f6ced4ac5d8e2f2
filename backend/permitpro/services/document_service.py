import logging
import uuid
from pathlib import Path

from sqlalchemy.orm import Session

from permitpro.config import settings
from permitpro.errors import NotFoundError, ValidationError
from permitpro.models.document import Document
from permitpro.models.package import Package
from permitpro.utils.filesystem import ensure_uploads_dir, sanitize_filename
from permitpro.utils.timestamps import utc_timestamp

logger = logging.getLogger("permitpro.documents")

DEFAULT_VERSION = "1.0"


def store_upload(file_name: str, content: bytes, uploads_dir: Path | None = None) -> str:
    """Write an upload under a fresh name. Returns the path relative to the uploads dir."""
    if not content:
        raise ValidationError("Empty file")
    suffix = sanitize_filename(Path(file_name or "").suffix)
    stored_name = f"{uuid.uuid4().hex}{suffix}"
    target_dir = ensure_uploads_dir(uploads_dir)
    (target_dir / stored_name).write_bytes(content)
    return stored_name


def get_upload_full_path(stored_path: str, uploads_dir: Path | None = None) -> Path:
    return (uploads_dir or settings.uploads_dir) / stored_path


class DocumentService:
    def __init__(self, db: Session):
        self.db = db

    def require_package(self, package_id: int) -> Package:
        package = self.db.get(Package, package_id)
        if not package:
            raise NotFoundError("Package", package_id)
        return package

    def register_document(
        self,
        package_id: int,
        file_name: str,
        stored_path: str,
        uploader_name: str | None = None,
    ) -> Document:
        """Record an uploaded file against a package.

        Every call appends a new row at version 1.0, re-uploading a file with
        the same name does not bump or replace anything.
        """
        package = self.require_package(package_id)
        now = utc_timestamp()
        doc = Document(
            package_id=package.id,
            file_name=file_name,
            file_path=stored_path,
            version=DEFAULT_VERSION,
            uploader_name=uploader_name or settings.default_uploader_name,
            created_at=now,
        )
        self.db.add(doc)
        package.updated_at = now
        self.db.commit()
        self.db.refresh(doc)
        logger.info("Registered document %s (%s) on package %s", doc.id, file_name, package_id)
        return doc

    def list_documents(self, package_id: int) -> list[Document]:
        self.require_package(package_id)
        return (
            self.db.query(Document)
            .filter(Document.package_id == package_id)
            .order_by(Document.id)
            .all()
        )

    def get_document(self, package_id: int, document_id: int) -> Document:
        doc = (
            self.db.query(Document)
            .filter(Document.id == document_id, Document.package_id == package_id)
            .first()
        )
        if not doc:
            raise NotFoundError("Document", document_id)
        return doc
