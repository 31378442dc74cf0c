"""
Local disk implementation of article storage.

Stores the article document as a JSON file on the local filesystem.
Default location: state/articles.json
"""
import logging
import os
from typing import Any, Dict, List

from newsroom.article_store import ArticleStore, empty_document, normalize_document
from newsroom.file_utils import load_json_file, save_json_file

logger = logging.getLogger(__name__)


class LocalDiskArticleStore(ArticleStore):
    """
    Local disk implementation of article storage.

    Writes replace the whole file. There is no locking, so with several
    writers the last one wins.
    """

    def __init__(self, state_dir: str = "state"):
        """
        Initialize local disk article store.

        Args:
            state_dir: Directory for storing the article file (default: "state")
        """
        self.state_dir = state_dir
        try:
            os.makedirs(self.state_dir, exist_ok=True)
        except OSError as exc:
            # Read-only deployments still serve reads; writes will report failure
            logger.warning("Could not create state directory %s: %s", self.state_dir, exc)

    def _get_filename(self) -> str:
        """Get the filename for article storage."""
        return "articles.json"

    def _get_filepath(self) -> str:
        """Get the full file path for storage."""
        return os.path.join(self.state_dir, self._get_filename())

    def load(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Load the article document from local disk.

        Returns:
            The stored document, or an empty document if the file is missing
            or cannot be parsed.
        """
        filepath = self._get_filepath()
        try:
            data = load_json_file(filepath, empty_document())
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read %s, using empty document: %s", filepath, exc)
            return empty_document()
        return normalize_document(data)

    def save(self, document: Dict[str, List[Dict[str, Any]]]) -> bool:
        """
        Save the article document to local disk.

        Args:
            document: The full document to persist.

        Returns:
            True on success, False if the file could not be written.
        """
        filepath = self._get_filepath()
        try:
            save_json_file(filepath, document)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to write %s: %s", filepath, exc)
            return False
        return True

    def exists(self) -> bool:
        """Check whether the article file exists."""
        return os.path.exists(self._get_filepath())
