"""
Factory function for creating article stores.
"""
from typing import Optional

from newsroom.article_store import ArticleStore
from newsroom.config import Config
from newsroom.local_disk_article_store import LocalDiskArticleStore
from newsroom.tigris_article_store import TigrisArticleStore


def create_article_store(state_dir: Optional[str] = None) -> ArticleStore:
    """
    Create an article store based on configuration.

    Reads ARTICLE_STORAGE_TYPE through Config to determine which
    implementation to use:
    - 'local' or unset: LocalDiskArticleStore (default)
    - 'tigris': TigrisArticleStore

    Args:
        state_dir: Directory for local disk storage. Defaults to
            Config.state_dir (NEWS_STATE_DIR, then "state").
            Only used when ARTICLE_STORAGE_TYPE is 'local' or unset.

    Returns:
        ArticleStore: Configured article store instance
    """
    config = Config()

    if config.article_storage_type == 'tigris':
        return TigrisArticleStore()
    else:
        # Default to local disk storage
        return LocalDiskArticleStore(state_dir=state_dir or config.state_dir)
