"""
Tigris/S3-compatible storage implementation of article storage.

Stores the article document in an S3-compatible object storage service,
so several site instances can serve the same articles.
Default object key: state/articles.json
"""
import json
import logging
import os
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from newsroom.article_store import ArticleStore, empty_document, normalize_document

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = ("NoSuchKey", "404", "NotFound")


class TigrisArticleStore(ArticleStore):
    """
    Tigris/S3-compatible storage implementation of article storage.

    Each save is a single put_object of the whole document; the last writer wins.
    """

    def __init__(
        self,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        bucket_name: Optional[str] = None,
        region: Optional[str] = None,
        object_key: str = "state/articles.json"
    ):
        """
        Initialize Tigris article store.

        Args:
            access_key_id: AWS access key ID (defaults to AWS_ACCESS_KEY_ID env var)
            secret_access_key: AWS secret access key (defaults to AWS_SECRET_ACCESS_KEY env var)
            endpoint_url: S3 endpoint URL (defaults to AWS_ENDPOINT_URL_S3 or
                         https://fly.storage.tigris.dev)
            bucket_name: S3 bucket name (defaults to TIGRIS_BUCKET_NAME env var)
            region: AWS region (defaults to AWS_REGION or 'auto')
            object_key: Key of the article document inside the bucket

        Raises:
            ValueError: If credentials or the bucket name are missing
        """
        # Get credentials from parameters or environment variables
        self.access_key_id = access_key_id or os.getenv('AWS_ACCESS_KEY_ID')
        self.secret_access_key = secret_access_key or os.getenv('AWS_SECRET_ACCESS_KEY')
        self.endpoint_url = (
            endpoint_url or
            os.getenv('AWS_ENDPOINT_URL_S3', 'https://fly.storage.tigris.dev')
        )
        self.bucket_name = bucket_name or os.getenv('TIGRIS_BUCKET_NAME')
        self.region = region or os.getenv('AWS_REGION', 'auto')
        self.object_key = object_key

        if not self.access_key_id or not self.secret_access_key:
            raise ValueError(
                "AWS credentials are required. Set AWS_ACCESS_KEY_ID and "
                "AWS_SECRET_ACCESS_KEY environment variables or pass them as parameters."
            )

        if not self.bucket_name:
            raise ValueError(
                "Bucket name is required. Set TIGRIS_BUCKET_NAME environment variable "
                "or pass it as a parameter."
            )

        # Initialize S3 client
        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            endpoint_url=self.endpoint_url,
            region_name=self.region
        )

    def load(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Load the article document from S3.

        Returns:
            The stored document, or an empty document if the object doesn't
            exist, cannot be fetched or is not valid JSON.
        """
        try:
            response = self.s3_client.get_object(
                Bucket=self.bucket_name,
                Key=self.object_key
            )
            content = response['Body'].read()
            data = json.loads(content.decode('utf-8'))
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') not in _MISSING_KEY_CODES:
                logger.warning("Failed to read s3://%s/%s: %s", self.bucket_name, self.object_key, e)
            return empty_document()
        except (BotoCoreError, ValueError) as e:
            logger.warning("Failed to read s3://%s/%s: %s", self.bucket_name, self.object_key, e)
            return empty_document()
        return normalize_document(data)

    def save(self, document: Dict[str, List[Dict[str, Any]]]) -> bool:
        """
        Save the article document to S3.

        Args:
            document: The full document to persist.

        Returns:
            True on success, False if the upload failed.
        """
        try:
            json_content = json.dumps(document, indent=2, ensure_ascii=False)
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=self.object_key,
                Body=json_content.encode('utf-8'),
                ContentType='application/json',
                CacheControl='no-cache, no-store, must-revalidate'
            )
        except (ClientError, BotoCoreError, TypeError, ValueError) as e:
            logger.error("Failed to write s3://%s/%s: %s", self.bucket_name, self.object_key, e)
            return False
        return True

    def exists(self) -> bool:
        """
        Check whether the article object exists in S3.

        Errors other than a missing key are treated as "exists" so that
        seeding never overwrites data that merely could not be checked.
        """
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=self.object_key)
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in _MISSING_KEY_CODES:
                return False
            logger.warning("Failed to check s3://%s/%s: %s", self.bucket_name, self.object_key, e)
            return True
        except BotoCoreError as e:
            logger.warning("Failed to check s3://%s/%s: %s", self.bucket_name, self.object_key, e)
            return True
        return True
