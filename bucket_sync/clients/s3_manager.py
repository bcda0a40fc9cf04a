"""
S3 client manager: session construction and the list/get/put calls the
sync step needs.
"""
from typing import Any, BinaryIO, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from ..exceptions import ClientConstructionError, ListError, TransferError
from ..models.config import PluginConfig

ASSUME_ROLE_DURATION_SECONDS = 3600


class S3Object:
    """Represents an S3 object with metadata."""

    def __init__(self, key: str, size: int, last_modified=None, etag: str = '', storage_class: str = 'STANDARD'):
        self.key = key
        self.size = size
        self.last_modified = last_modified
        self.etag = etag
        self.storage_class = storage_class

    def __repr__(self):
        return f"S3Object(key={self.key!r}, size={self.size})"


def _assume_role(session: boto3.session.Session, role_arn: str, session_name: str) -> Dict[str, str]:
    """Exchange the session's credentials for temporary ones of ``role_arn``."""
    sts = session.client('sts')
    response = sts.assume_role(
        RoleArn=role_arn,
        RoleSessionName=session_name,
        DurationSeconds=ASSUME_ROLE_DURATION_SECONDS
    )
    credentials = response['Credentials']
    return {
        'aws_access_key_id': credentials['AccessKeyId'],
        'aws_secret_access_key': credentials['SecretAccessKey'],
        'aws_session_token': credentials['SessionToken']
    }


def create_s3_client(config: PluginConfig):
    """
    Create an authenticated S3 client from configuration.

    Credentials are taken from the static key pair when both halves are set,
    otherwise from an assumed role, otherwise from the default credential
    chain (instance profile). When a user role ARN is set, that role is
    assumed on top of the base session.

    Raises:
        ClientConstructionError: If the session or client cannot be built
    """
    client_config = Config(
        signature_version='s3v4',
        s3={'addressing_style': 'path' if config.path_style else 'auto'}
    )

    try:
        if config.has_static_credentials:
            session = boto3.session.Session(
                aws_access_key_id=config.access_key,
                aws_secret_access_key=config.secret_key,
                region_name=config.region
            )
        elif config.assume_role:
            logger.debug(f"Assuming role: {config.assume_role}")
            base_session = boto3.session.Session(region_name=config.region)
            credentials = _assume_role(base_session, config.assume_role, config.assume_role_session_name)
            session = boto3.session.Session(region_name=config.region, **credentials)
        else:
            logger.warning("AWS Key and/or Secret not provided (falling back to ec2 instance profile)")
            session = boto3.session.Session(region_name=config.region)

        if config.user_role_arn:
            logger.debug(f"Assuming user role: {config.user_role_arn}")
            credentials = _assume_role(session, config.user_role_arn, config.assume_role_session_name)
            session = boto3.session.Session(region_name=config.region, **credentials)

        client = session.client(
            's3',
            endpoint_url=config.endpoint or None,
            use_ssl=not config.endpoint.startswith('http://'),
            config=client_config
        )
        logger.debug(f"Created S3 client for endpoint: {config.endpoint or 'default'}")
        return client
    except (BotoCoreError, ClientError, ValueError) as e:
        logger.error(f"Could not instantiate session - endpoint: {config.endpoint}, error: {e}")
        raise ClientConstructionError(f"Could not instantiate session: {e}", bucket=config.bucket) from e


class S3Manager:
    """Runs the list, get and put operations against the configured bucket."""

    def __init__(self, config: PluginConfig, client=None):
        """
        Initialize S3Manager.

        Args:
            config: PluginConfig with bucket, endpoint and credential settings
            client: Pre-built boto3 S3 client; built from ``config`` when omitted
        """
        self.config = config
        self.bucket = config.bucket
        self.client = client if client is not None else create_s3_client(config)

        logger.debug(f"S3Manager initialized for bucket: {self.bucket}")

    def list_objects(self, prefix: str) -> List[S3Object]:
        """
        List objects under a prefix with a single listing call.

        Only the first page of results is returned.

        Args:
            prefix: Key prefix to list

        Returns:
            List[S3Object]: Objects in listing order

        Raises:
            ListError: If the listing call fails
        """
        try:
            response = self.client.list_objects_v2(Bucket=self.bucket, Prefix=prefix)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Cannot list S3 directory - bucket: {self.bucket}, dir: {prefix}, error: {e}")
            raise ListError(f"Cannot list S3 directory: {e}", bucket=self.bucket, key=prefix) from e

        if response.get('IsTruncated'):
            logger.warning(f"Listing of {prefix!r} is truncated, only the first page will be processed")

        return [
            S3Object(
                key=obj['Key'],
                size=obj.get('Size', 0),
                last_modified=obj.get('LastModified'),
                etag=obj.get('ETag', '').strip('"'),
                storage_class=obj.get('StorageClass', 'STANDARD')
            )
            for obj in response.get('Contents', [])
        ]

    def get_object_stream(self, key: str) -> BinaryIO:
        """
        Get an object as a binary stream.

        Raises:
            TransferError: If the object cannot be fetched
        """
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Cannot get S3 object - bucket: {self.bucket}, key: {key}, error: {e}")
            raise TransferError(f"Cannot get S3 object: {e}", bucket=self.bucket, key=key) from e

        return response['Body']

    def put_object(self, key: str, body: BinaryIO, acl: str, content_type: str,
                   content_encoding: Optional[str] = None, cache_control: Optional[str] = None,
                   server_side_encryption: Optional[str] = None,
                   storage_class: Optional[str] = None) -> Dict[str, Any]:
        """
        Upload a stream to ``key``. Optional settings are only sent when set.

        Raises:
            TransferError: If the upload fails
        """
        params = {
            'Body': body,
            'Bucket': self.bucket,
            'Key': key,
            'ContentType': content_type
        }
        if acl:
            params['ACL'] = acl
        if content_encoding:
            params['ContentEncoding'] = content_encoding
        if cache_control:
            params['CacheControl'] = cache_control
        if server_side_encryption:
            params['ServerSideEncryption'] = server_side_encryption
        if storage_class:
            params['StorageClass'] = storage_class

        try:
            return self.client.put_object(**params)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Could not upload file - bucket: {self.bucket}, target: {key}, error: {e}")
            raise TransferError(f"Could not upload file: {e}", bucket=self.bucket, key=key) from e
