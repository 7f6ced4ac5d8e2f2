from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from permitpro.config import settings
from permitpro.dependencies import get_document_service, get_package_service
from permitpro.schemas.document import DocumentResponse
from permitpro.schemas.package import PackageResponse
from permitpro.serializers import document_to_response, package_to_response
from permitpro.services.document_service import DocumentService, store_upload
from permitpro.services.package_service import PackageService

router = APIRouter(prefix="/permits/{package_id}/documents", tags=["documents"])


@router.post("", response_model=PackageResponse, status_code=201)
async def upload_document(
    package_id: int,
    document: UploadFile = File(...),
    uploader_name: str | None = Form(None, alias="uploaderName"),
    documents: DocumentService = Depends(get_document_service),
    packages: PackageService = Depends(get_package_service),
):
    # No bytes hit the disk for a package that does not exist
    documents.require_package(package_id)

    max_bytes = settings.max_upload_bytes
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await document.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise HTTPException(status_code=413, detail=f"File too large (max {max_bytes} bytes)")
        chunks.append(chunk)

    stored_path = store_upload(document.filename, b"".join(chunks))
    documents.register_document(
        package_id,
        file_name=document.filename or stored_path,
        stored_path=stored_path,
        uploader_name=uploader_name,
    )
    return package_to_response(packages.get_package(package_id))


@router.get("", response_model=list[DocumentResponse])
async def list_documents(package_id: int, documents: DocumentService = Depends(get_document_service)):
    return [document_to_response(d) for d in documents.list_documents(package_id)]


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    package_id: int,
    document_id: int,
    documents: DocumentService = Depends(get_document_service),
):
    return document_to_response(documents.get_document(package_id, document_id))
