"""
Unit tests for ArticleStore implementations.
"""
import json
import os
import shutil
import tempfile
from unittest.mock import patch

import pytest

from tests.unit.test_store_base import BaseLocalDiskStoreTests, BaseTigrisStoreTests, make_article


class TestNormalizeDocument:
    """Test suite for normalize_document."""

    def test_keeps_articles_list(self):
        """Test that a well-formed document passes through."""
        from newsroom.article_store import normalize_document
        doc = {"articles": [make_article("a1")]}
        assert normalize_document(doc) == doc

    def test_reads_legacy_news_key(self):
        """Test that documents using the old 'news' key are accepted."""
        from newsroom.article_store import normalize_document
        doc = normalize_document({"news": [make_article("a1")]})
        assert [a["id"] for a in doc["articles"]] == ["a1"]
        assert "news" not in doc

    @pytest.mark.parametrize("raw", [None, [], "text", 42, {}, {"articles": "nope"}])
    def test_non_documents_become_empty(self, raw):
        """Test that anything that isn't a document yields an empty document."""
        from newsroom.article_store import normalize_document
        assert normalize_document(raw) == {"articles": []}

    def test_drops_non_object_entries(self):
        """Test that stray non-object entries are dropped."""
        from newsroom.article_store import normalize_document
        doc = normalize_document({"articles": [make_article("a1"), "junk", 3]})
        assert len(doc["articles"]) == 1


class TestLocalDiskArticleStore(BaseLocalDiskStoreTests):
    """Test suite for LocalDiskArticleStore."""

    @pytest.fixture
    def store(self, temp_state_dir):
        """Create a LocalDiskArticleStore instance."""
        from newsroom.local_disk_article_store import LocalDiskArticleStore
        return LocalDiskArticleStore(state_dir=temp_state_dir)

    def test_implements_interface(self, store):
        """Test that LocalDiskArticleStore implements ArticleStore interface."""
        from newsroom.article_store import ArticleStore
        assert isinstance(store, ArticleStore)

    def test_load_empty_by_default(self, store):
        """Test that load returns an empty document when no file exists."""
        assert store.load() == {"articles": []}
        assert store.exists() is False

    def test_creates_state_dir(self):
        """Test that the state directory is created on initialization."""
        from newsroom.local_disk_article_store import LocalDiskArticleStore
        temp_dir = tempfile.mkdtemp()
        try:
            state_dir = os.path.join(temp_dir, "nested", "state")
            LocalDiskArticleStore(state_dir=state_dir)
            assert os.path.isdir(state_dir)
        finally:
            shutil.rmtree(temp_dir)

    def test_save_and_load_round_trip(self, store):
        """Test that a saved document is loaded back field for field."""
        doc = {"articles": [make_article("a2", "2024-01-02T00:00:00Z"), make_article("a1")]}
        assert store.save(doc) is True
        assert store.load() == doc
        assert store.exists() is True

    def test_save_preserves_unicode(self, store, temp_state_dir):
        """Test that non-ASCII text is written as UTF-8."""
        doc = {"articles": [make_article("a1", title="Café olé ⚽")]}
        assert store.save(doc) is True
        with open(os.path.join(temp_state_dir, "articles.json"), "r", encoding="utf-8") as f:
            assert "Café olé ⚽" in f.read()
        assert store.load()["articles"][0]["title"] == "Café olé ⚽"

    def test_save_overwrites_whole_file(self, store):
        """Test that save replaces the previous document entirely."""
        store.save({"articles": [make_article("a1"), make_article("a2")]})
        store.save({"articles": [make_article("a3")]})
        assert [a["id"] for a in store.load()["articles"]] == ["a3"]

    def test_persists_to_file(self, store, temp_state_dir):
        """Test that the document is persisted to disk as JSON."""
        store.save({"articles": [make_article("a1")]})
        articles_file = os.path.join(temp_state_dir, "articles.json")
        assert os.path.exists(articles_file)
        with open(articles_file, "r") as f:
            data = json.load(f)
        assert data["articles"][0]["id"] == "a1"

    def test_loads_from_existing_file(self, temp_state_dir):
        """Test that articles are loaded from an existing file."""
        from newsroom.local_disk_article_store import LocalDiskArticleStore
        self.write_articles_file(temp_state_dir, {"articles": [make_article("a1")]})
        store = LocalDiskArticleStore(state_dir=temp_state_dir)
        assert store.load()["articles"][0]["id"] == "a1"

    def test_corrupt_file_loads_empty(self, store, temp_state_dir):
        """Test that an unparseable file yields an empty document."""
        with open(os.path.join(temp_state_dir, "articles.json"), "w") as f:
            f.write("{not json")
        assert store.load() == {"articles": []}

    def test_unexpected_shape_loads_empty(self, store, temp_state_dir):
        """Test that a JSON file that isn't a document yields an empty document."""
        self.write_articles_file(temp_state_dir, ["a", "b"])
        assert store.load() == {"articles": []}

    def test_save_failure_returns_false(self, store):
        """Test that a failed write returns False instead of raising."""
        with patch(
            "newsroom.local_disk_article_store.save_json_file",
            side_effect=PermissionError("Read-only file system")
        ):
            assert store.save({"articles": [make_article("a1")]}) is False

    def test_save_failure_leaves_previous_state(self, store):
        """Test that prior persisted state is unchanged after a failed write."""
        original = {"articles": [make_article("a1")]}
        store.save(original)
        with patch(
            "newsroom.local_disk_article_store.save_json_file",
            side_effect=OSError("disk full")
        ):
            assert store.save({"articles": []}) is False
        assert store.load() == original

    def test_unserializable_document_leaves_file_intact(self, store):
        """Test that a document that can't be encoded doesn't truncate the file."""
        original = {"articles": [make_article("a1")]}
        store.save(original)
        assert store.save({"articles": [make_article("a2", imageUrl=object())]}) is False
        assert store.load() == original

    def test_unwritable_state_dir(self):
        """Test a state directory that cannot be created: reads are empty, writes fail."""
        from newsroom.local_disk_article_store import LocalDiskArticleStore
        temp_dir = tempfile.mkdtemp()
        try:
            blocker = os.path.join(temp_dir, "blocker")
            with open(blocker, "w") as f:
                f.write("not a directory")
            store = LocalDiskArticleStore(state_dir=os.path.join(blocker, "state"))
            assert store.load() == {"articles": []}
            assert store.save({"articles": [make_article("a1")]}) is False
            assert store.exists() is False
        finally:
            shutil.rmtree(temp_dir)


class TestTigrisArticleStore(BaseTigrisStoreTests):
    """Test suite for TigrisArticleStore using mocked S3."""

    @pytest.fixture
    def store(self, mock_s3_client, monkeypatch):
        """Create a TigrisArticleStore with mocked S3 client."""
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
        monkeypatch.setenv("TIGRIS_BUCKET_NAME", "test-bucket")
        from newsroom.tigris_article_store import TigrisArticleStore
        ext = TigrisArticleStore()
        ext.s3_client = mock_s3_client
        return ext

    def test_implements_interface(self, store):
        """Test that TigrisArticleStore implements ArticleStore interface."""
        from newsroom.article_store import ArticleStore
        assert isinstance(store, ArticleStore)

    def test_requires_credentials(self, monkeypatch):
        """Test that missing credentials raise ValueError."""
        monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
        monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)
        monkeypatch.setenv("TIGRIS_BUCKET_NAME", "test-bucket")
        from newsroom.tigris_article_store import TigrisArticleStore
        with pytest.raises(ValueError):
            TigrisArticleStore()

    def test_requires_bucket(self, monkeypatch):
        """Test that a missing bucket name raises ValueError."""
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
        monkeypatch.delenv("TIGRIS_BUCKET_NAME", raising=False)
        from newsroom.tigris_article_store import TigrisArticleStore
        with pytest.raises(ValueError):
            TigrisArticleStore()

    def test_load_empty_when_no_key(self, store, mock_s3_client):
        """Test load returns an empty document when the object doesn't exist."""
        self.setup_mock_client_error(mock_s3_client, "NoSuchKey")
        assert store.load() == {"articles": []}

    def test_load_empty_on_other_client_error(self, store, mock_s3_client):
        """Test load never raises on S3 errors."""
        self.setup_mock_client_error(mock_s3_client, "AccessDenied")
        assert store.load() == {"articles": []}

    def test_load_empty_on_invalid_json(self, store, mock_s3_client):
        """Test load returns an empty document when the object isn't JSON."""
        from unittest.mock import Mock
        mock_body = Mock()
        mock_body.read.return_value = b"{not json"
        mock_s3_client.get_object.return_value = {"Body": mock_body}
        assert store.load() == {"articles": []}

    def test_load_from_s3(self, store, mock_s3_client):
        """Test load returns the document from S3."""
        self.setup_mock_get_object(mock_s3_client, {"articles": [make_article("a1")]})
        doc = store.load()
        assert doc["articles"][0]["id"] == "a1"
        mock_s3_client.get_object.assert_called_once_with(
            Bucket="test-bucket", Key="state/articles.json"
        )

    def test_save_puts_whole_document(self, store, mock_s3_client):
        """Test that save uploads the full document."""
        doc = {"articles": [make_article("a1"), make_article("a2")]}
        assert store.save(doc) is True
        mock_s3_client.put_object.assert_called_once()
        call_kwargs = mock_s3_client.put_object.call_args[1]
        assert call_kwargs["Bucket"] == "test-bucket"
        assert call_kwargs["Key"] == "state/articles.json"
        assert call_kwargs["ContentType"] == "application/json"
        assert json.loads(call_kwargs["Body"]) == doc

    def test_save_failure_returns_false(self, store, mock_s3_client):
        """Test that an S3 write error returns False instead of raising."""
        self.setup_mock_client_error(mock_s3_client, "AccessDenied", method="put_object")
        assert store.save({"articles": []}) is False

    def test_exists_true_when_object_present(self, store, mock_s3_client):
        """Test exists when head_object succeeds."""
        mock_s3_client.head_object.return_value = {}
        assert store.exists() is True

    def test_exists_false_when_missing(self, store, mock_s3_client):
        """Test exists when the object is missing."""
        self.setup_mock_client_error(mock_s3_client, "404", method="head_object")
        assert store.exists() is False

    def test_exists_true_on_unexpected_error(self, store, mock_s3_client):
        """Test that an unexpected error is not reported as a missing object."""
        self.setup_mock_client_error(mock_s3_client, "AccessDenied", method="head_object")
        assert store.exists() is True

    def test_object_key_is_correct(self, store):
        """Test that the S3 object key is correct."""
        assert store.object_key == "state/articles.json"


class TestArticleStoreFactory:
    """Test suite for article store factory function."""

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory."""
        temp_dir = tempfile.mkdtemp()
        yield temp_dir
        shutil.rmtree(temp_dir)

    def test_factory_returns_local_by_default(self, monkeypatch, temp_dir):
        """Test factory returns LocalDiskArticleStore when ARTICLE_STORAGE_TYPE not set."""
        monkeypatch.delenv("ARTICLE_STORAGE_TYPE", raising=False)
        from newsroom.article_store_factory import create_article_store
        from newsroom.local_disk_article_store import LocalDiskArticleStore
        store = create_article_store(state_dir=temp_dir)
        assert isinstance(store, LocalDiskArticleStore)
        assert store.state_dir == temp_dir

    def test_factory_uses_state_dir_env(self, monkeypatch, temp_dir):
        """Test factory reads NEWS_STATE_DIR when no state_dir is passed."""
        monkeypatch.setenv("ARTICLE_STORAGE_TYPE", "local")
        monkeypatch.setenv("NEWS_STATE_DIR", temp_dir)
        from newsroom.article_store_factory import create_article_store
        store = create_article_store()
        assert store.state_dir == temp_dir

    def test_factory_returns_tigris(self, monkeypatch):
        """Test factory returns TigrisArticleStore when ARTICLE_STORAGE_TYPE=tigris."""
        monkeypatch.setenv("ARTICLE_STORAGE_TYPE", "Tigris")
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
        monkeypatch.setenv("TIGRIS_BUCKET_NAME", "test-bucket")
        from newsroom.article_store_factory import create_article_store
        from newsroom.tigris_article_store import TigrisArticleStore
        store = create_article_store()
        assert isinstance(store, TigrisArticleStore)

    def test_factory_reads_settings_from_config(self, temp_dir):
        """Test factory takes storage type and state dir from Config."""
        from newsroom.article_store_factory import create_article_store
        from newsroom.local_disk_article_store import LocalDiskArticleStore
        with patch("newsroom.article_store_factory.Config") as mock_config:
            mock_config.return_value.article_storage_type = "local"
            mock_config.return_value.state_dir = temp_dir
            store = create_article_store()
        mock_config.assert_called_once_with()
        assert isinstance(store, LocalDiskArticleStore)
        assert store.state_dir == temp_dir
