"""
Article service for the newsroom site.

Implements listing, search, lookup, creation and deletion of articles on top of
an ArticleStore. Every call loads the whole document; mutations write the whole
document back. A failed write does not fail the operation: the result carries
PersistenceOutcome.EPHEMERAL so callers can warn that the change only lived in
this request's memory.
"""
import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from newsroom.article_store import DOCUMENT_KEY, ArticleStore
from newsroom.article_validator import ArticleValidator
from newsroom.config import DEFAULT_IMAGE_URL
from newsroom.file_utils import get_utc_timestamp, parse_utc_timestamp
from newsroom.seed_data import build_sample_articles

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("title", "content", "author", "category")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class NewsroomError(Exception):
    """Base class for article service errors."""


class ArticleValidationError(NewsroomError):
    """Raised when a submitted article lacks required fields."""

    def __init__(self, missing_fields: List[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(f"Missing required fields: {', '.join(self.missing_fields)}")


class ArticleNotFoundError(NewsroomError):
    """Raised when no article has the requested id."""

    def __init__(self, article_id: str):
        self.article_id = article_id
        super().__init__("Article not found")


class PersistenceOutcome(str, Enum):
    """Whether a mutation reached durable storage."""

    PERSISTED = "persisted"
    EPHEMERAL = "ephemeral"


class WriteResult:
    """Value produced by a mutation together with its persistence outcome."""

    def __init__(self, value: Dict[str, Any], outcome: PersistenceOutcome):
        self.value = value
        self.outcome = outcome

    @property
    def persisted(self) -> bool:
        """True if the change was written to the store."""
        return self.outcome is PersistenceOutcome.PERSISTED

    def __repr__(self) -> str:
        return f"WriteResult(value={self.value!r}, outcome={self.outcome.value!r})"


def _created_at_key(article: Dict[str, Any]) -> datetime:
    return parse_utc_timestamp(article.get("createdAt")) or _OLDEST


def _matches_query(article: Dict[str, Any], needle: str) -> bool:
    for field in SEARCH_FIELDS:
        value = article.get(field)
        if value is not None and needle in str(value).lower():
            return True
    return False


class ArticleService:
    """Article operations over a single article document."""

    def __init__(
        self,
        store: ArticleStore,
        default_image_url: str = DEFAULT_IMAGE_URL,
        validator: Optional[ArticleValidator] = None
    ):
        """
        Initialize the article service.

        Args:
            store: Backend holding the article document
            default_image_url: Image used when an article is created without one
            validator: Presence validator for new articles
        """
        self.store = store
        self.default_image_url = default_image_url
        self.validator = validator or ArticleValidator()

    def _persist(self, document: Dict[str, List[Dict[str, Any]]], action: str) -> PersistenceOutcome:
        if self.store.save(document):
            return PersistenceOutcome.PERSISTED
        logger.warning("%s was not persisted; the change is ephemeral", action)
        return PersistenceOutcome.EPHEMERAL

    def list_articles(self, category: Optional[str] = None, query: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List articles, newest first.

        Args:
            category: Only return articles whose category equals this value
            query: Only return articles where this text appears (case-insensitive)
                in the title, content, author or category

        Returns:
            Matching articles sorted by createdAt descending
        """
        articles = self.store.load()[DOCUMENT_KEY]

        if category:
            articles = [a for a in articles if a.get("category") == category]

        if query:
            needle = query.lower()
            articles = [a for a in articles if _matches_query(a, needle)]

        return sorted(articles, key=_created_at_key, reverse=True)

    def get_article(self, article_id: str) -> Dict[str, Any]:
        """
        Get a single article by id.

        Raises:
            ArticleNotFoundError: If no article has this id
        """
        for article in self.store.load()[DOCUMENT_KEY]:
            if article.get("id") == article_id:
                return article
        raise ArticleNotFoundError(article_id)

    def create_article(self, fields: Dict[str, Any]) -> WriteResult:
        """
        Create and store a new article.

        Args:
            fields: Submitted values for title, content, category, author and
                optionally imageUrl. Other keys are ignored.

        Returns:
            WriteResult holding the created article

        Raises:
            ArticleValidationError: If a required field is missing or blank
        """
        is_valid, missing = self.validator.validate(fields)
        if not is_valid:
            raise ArticleValidationError(missing)

        article = {
            "id": str(uuid.uuid4()),
            "title": fields["title"],
            "content": fields["content"],
            "category": fields["category"],
            "author": fields["author"],
            "imageUrl": fields.get("imageUrl") or self.default_image_url,
            "createdAt": get_utc_timestamp(),
        }

        document = self.store.load()
        document[DOCUMENT_KEY].insert(0, article)

        outcome = self._persist(document, f"Create of article {article['id']}")
        logger.info("Created article %s in category %s", article["id"], article["category"])
        return WriteResult(article, outcome)

    def delete_article(self, article_id: str) -> WriteResult:
        """
        Delete an article by id.

        Returns:
            WriteResult holding the removed article

        Raises:
            ArticleNotFoundError: If no article has this id
        """
        document = self.store.load()
        articles = document[DOCUMENT_KEY]

        for index, article in enumerate(articles):
            if article.get("id") == article_id:
                del articles[index]
                break
        else:
            raise ArticleNotFoundError(article_id)

        outcome = self._persist(document, f"Delete of article {article_id}")
        logger.info("Deleted article %s", article_id)
        return WriteResult(article, outcome)

    def seed_if_absent(self) -> bool:
        """
        Write the sample articles if the store has no data yet.

        Returns:
            True if sample articles were written
        """
        if self.store.exists():
            return False

        articles = build_sample_articles()
        if not self.store.save({DOCUMENT_KEY: articles}):
            logger.warning("Could not write sample articles; store stays empty")
            return False

        logger.info("Article store initialized with %d sample articles", len(articles))
        return True
