import hashlib
import os
import time

from fastapi import UploadFile

STORAGE_DIR = (os.getenv("SIGNAGE_STORAGE_DIR", "storage") or "storage").rstrip("/\\")
MEDIA_DIR = os.path.join(STORAGE_DIR, "media")

_MB = 1024 * 1024


class MediaRule:
    def __init__(self, label: str, extensions: set[str], max_bytes: int) -> None:
        self.label = label
        self.extensions = extensions
        self.max_bytes = max_bytes

    def check(self, ext: str, size: int) -> None:
        if ext not in self.extensions:
            names = "/".join(sorted(e.lstrip(".").upper() for e in self.extensions))
            raise ValueError(f"Unsupported {self.label.lower()} format. Use {names}.")
        if size > self.max_bytes:
            raise ValueError(f"{self.label} exceeds the {self.max_bytes // _MB} MB limit.")


MEDIA_RULES = {
    "image": MediaRule(
        "Image",
        {".jpg", ".jpeg", ".png", ".webp", ".gif"},
        int(os.getenv("SIGNAGE_MAX_IMAGE_BYTES", str(15 * _MB))),
    ),
    "video": MediaRule(
        "Video",
        {".mp4", ".webm", ".mkv", ".mov"},
        int(os.getenv("SIGNAGE_MAX_VIDEO_BYTES", str(250 * _MB))),
    ),
}


def ensure_storage() -> None:
    os.makedirs(MEDIA_DIR, exist_ok=True)


def media_type_for(content_type: str | None, declared_type: str | None = None) -> str:
    """Declared type wins; otherwise sniff the upload's content type."""
    if declared_type:
        return normalized_media_type(declared_type)
    return "video" if (content_type or "").lower().startswith("video") else "image"


def normalized_media_type(raw: str | None) -> str:
    media_type = (raw or "").strip().lower()
    if media_type not in MEDIA_RULES:
        raise ValueError("Unsupported media type. Use image or video.")
    return media_type


def _stored_name(filename: str, ext: str) -> str:
    stem = os.path.splitext(filename)[0]
    stem = "".join(ch for ch in stem if ch.isalnum() or ch in "-_ ").strip() or "media"
    return f"{stem}-{int(time.time() * 1000)}{ext}"


def save_file(file: UploadFile, media_type: str) -> tuple[str, int, str]:
    """Write an upload under the media dir; returns (relative path, size, sha256)."""
    rule = MEDIA_RULES[normalized_media_type(media_type)]
    content = file.file.read()
    if not content:
        raise ValueError("Empty files cannot be uploaded.")
    filename = os.path.basename((file.filename or "").strip()) or "upload.bin"
    ext = os.path.splitext(filename.lower())[1]
    rule.check(ext, len(content))

    ensure_storage()
    stored = _stored_name(filename, ext)
    with open(os.path.join(MEDIA_DIR, stored), "wb") as f:
        f.write(content)
    return f"media/{stored}", len(content), hashlib.sha256(content).hexdigest()


def delete_file(relative_path: str) -> bool:
    path = os.path.join(STORAGE_DIR, relative_path.lstrip("/"))
    if not os.path.isfile(path):
        return False
    os.remove(path)
    return True
