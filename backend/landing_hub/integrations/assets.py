import logging
import os
import uuid
from typing import Optional

from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'svg', 'webp', 'mp4', 'mov', 'webm'}
VIDEO_EXTENSIONS = {'mp4', 'mov', 'webm'}
IMAGE_SIZES = ("thumbnail", "medium", "large", "full")


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS


def is_video(ref):
    return '.' in (ref or "") and ref.rsplit('.', 1)[1].lower() in VIDEO_EXTENSIONS


class LocalAssetStore:
    """
    Uploaded branding assets on the local filesystem.

    A *ref* is the stored file name; ``get_image_url`` turns it into a
    public URL. Sized variants are not generated, every size maps to the
    original file.
    """

    def __init__(self, upload_folder: str, public_base_url: str = ""):
        self.upload_folder = upload_folder
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, ref):
        return os.path.join(self.upload_folder, os.path.basename(ref))

    def save_upload(self, file) -> str:
        if not file or not file.filename or not allowed_file(file.filename):
            raise ValueError("File type not allowed")

        filename = secure_filename(file.filename)
        ext = filename.rsplit('.', 1)[1].lower()
        ref = f"{uuid.uuid4().hex}.{ext}"

        os.makedirs(self.upload_folder, exist_ok=True)
        file.save(self._path(ref))
        return ref

    def exists(self, ref) -> bool:
        return bool(ref) and os.path.exists(self._path(ref))

    def get_image_url(self, ref: str, size: str = "full") -> Optional[str]:
        if not ref:
            return None
        # Remote refs (CDN, profile directory) are already URLs
        if ref.startswith(("http://", "https://", "/")):
            return ref
        if size not in IMAGE_SIZES:
            size = "full"
        if not self.exists(ref):
            return None
        return f"{self.public_base_url}/uploads/{os.path.basename(ref)}"

    def delete(self, ref) -> bool:
        """Deletes a stored asset; failures are logged, not raised."""
        if not ref:
            return False

        file_path = self._path(ref)
        if os.path.exists(file_path):
            try:
                os.remove(file_path)
                return True
            except OSError as e:
                logger.error("Failed to delete file %s: %s", file_path, e)
                return False
        return False
