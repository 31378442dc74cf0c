"""
Abstract interface for article storage backends.

A store persists one JSON document, {"articles": [...]}, holding every article
in insertion order. Implementations can keep the document on local disk or in
distributed storage (Tigris/S3). Stores never raise to their callers: reads
degrade to an empty document and writes report failure through their return
value, so the site keeps working on read-only deployment targets.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List

DOCUMENT_KEY = "articles"

# Documents written by the first version of the site used this key
LEGACY_DOCUMENT_KEY = "news"


def empty_document() -> Dict[str, List[Dict[str, Any]]]:
    """Return a fresh empty article document."""
    return {DOCUMENT_KEY: []}


def normalize_document(data: Any) -> Dict[str, List[Dict[str, Any]]]:
    """
    Coerce raw decoded JSON into an article document.

    Args:
        data: Whatever was decoded from storage.

    Returns:
        A document with an "articles" list. Anything that is not a document,
        and any entry that is not an object, is dropped.
    """
    if not isinstance(data, dict):
        return empty_document()

    articles = data.get(DOCUMENT_KEY)
    if not isinstance(articles, list):
        articles = data.get(LEGACY_DOCUMENT_KEY)
    if not isinstance(articles, list):
        return empty_document()

    return {DOCUMENT_KEY: [a for a in articles if isinstance(a, dict)]}


class ArticleStore(ABC):
    """Abstract base class for article storage backends."""

    @abstractmethod
    def load(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Load the whole article document.

        Returns:
            The stored document, or an empty document when the backing data is
            missing, unreadable or not valid JSON.
        """

    @abstractmethod
    def save(self, document: Dict[str, List[Dict[str, Any]]]) -> bool:
        """
        Overwrite the stored document.

        Args:
            document: The full document to persist.

        Returns:
            True if the document was persisted, False if the write failed.
        """

    @abstractmethod
    def exists(self) -> bool:
        """
        Check whether the backing file or object has been created.

        Returns:
            True if stored data is present.
        """
