from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_path: Path = Path.home() / "PermitPro"
    # Uploads above this size are rejected before anything touches the disk.
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000"]
    default_uploader_name: str = "Admin User"
    default_user_name: str = "Admin User"
    default_user_role: str = "Administrator"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def db_path(self) -> Path:
        return self.data_path / "db.sqlite"

    @property
    def uploads_dir(self) -> Path:
        return self.data_path / "uploads"

    model_config = {"env_prefix": "PERMITPRO_"}


settings = Settings()
