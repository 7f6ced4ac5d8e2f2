from permitpro.schemas.base import CamelModel


class DocumentResponse(CamelModel):
    id: int
    package_id: int
    file_name: str
    file_path: str
    version: str
    uploader_name: str
    created_at: str
