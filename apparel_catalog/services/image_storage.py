"""Local blob storage for catalog images."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads/"


class LocalImageStorage:
    """Image files stored under a local uploads directory.

    Images are referenced by URLs such as ``/uploads/catalog/123-abc.png``,
    which map to ``<root>/catalog/123-abc.png``.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def path_for(self, image_url: str | None) -> Path | None:
        """Resolve an image URL to a path inside the root.

        Returns None for empty URLs, URLs outside the uploads prefix and
        paths that would escape the root.
        """
        if not image_url or not image_url.startswith(UPLOADS_URL_PREFIX):
            return None
        relative = image_url[len(UPLOADS_URL_PREFIX):].split("?", 1)[0]
        if not relative:
            return None
        path = (self.root / relative).resolve()
        if not path.is_relative_to(self.root):
            logger.warning("Refusing image path outside uploads root: %s", image_url)
            return None
        return path

    def delete(self, image_url: str | None) -> bool:
        """Delete the image behind ``image_url``.

        Returns:
            True if a file was removed, False if there was nothing to remove.

        Raises:
            OSError: If the file exists but cannot be removed.
        """
        path = self.path_for(image_url)
        if path is None or not path.is_file():
            return False
        path.unlink()
        logger.info("Deleted catalog image: %s", path)
        return True
