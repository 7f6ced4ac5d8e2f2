from pathlib import Path
from permitpro.config import settings


def ensure_data_dirs(data_path: Path | None = None) -> Path:
    path = data_path or settings.data_path
    path.mkdir(parents=True, exist_ok=True)
    (path / "uploads").mkdir(exist_ok=True)
    return path


def ensure_uploads_dir(uploads_dir: Path | None = None) -> Path:
    path = uploads_dir or settings.uploads_dir
    path.mkdir(parents=True, exist_ok=True)
    return path


def sanitize_filename(name: str) -> str:
    keep = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._-")
    return "".join(c if c in keep else "_" for c in name)
