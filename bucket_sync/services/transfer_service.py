"""
Transfer orchestrator: uploads matched local files to the bucket, or
downloads a bucket prefix to local disk.
"""
import os
import shutil
import stat
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Tuple

from botocore.exceptions import BotoCoreError
from loguru import logger

from ..clients.s3_manager import S3Manager, S3Object
from ..exceptions import GlobError, LocalIOError, TransferError
from ..models.config import PluginConfig
from ..models.data_models import TransferItem, TransferMode, TransferResult
from .key_mapper import normalize_target, resolve_key, resolve_source, resolve_target_dir
from .metadata_resolver import resolve_metadata
from .path_matcher import match_files

# (key, transferred, error) for one download task
DownloadOutcome = Tuple[str, bool, Optional[BaseException]]


class TransferService:
    """
    Runs one upload or download pass for a configuration.

    Uploads are sequential and stop at the first failure. Downloads run one
    task per listed object; a failing task does not cancel its siblings, and
    the run fails with the first failure collected.
    """

    def __init__(self, config: PluginConfig, s3_manager: Optional[S3Manager] = None):
        """
        Initialize transfer service with configuration.

        Args:
            config: PluginConfig for this run
            s3_manager: Client wrapper to use; built from ``config`` on first use when omitted
        """
        self.config = config
        self.s3_manager = s3_manager

    def _get_s3_manager(self) -> S3Manager:
        if self.s3_manager is None:
            self.s3_manager = S3Manager(self.config)
        return self.s3_manager

    def run(self) -> TransferResult:
        """
        Execute the configured mode.

        Returns:
            TransferResult summarizing the run

        Raises:
            BucketSyncError: The first error encountered
        """
        if self.config.download:
            return self.run_download()
        return self.run_upload()

    def build_upload_item(self, target: str, path: str) -> TransferItem:
        """Resolve the key and object metadata for one local file."""
        content_type, content_encoding, cache_control = resolve_metadata(path, self.config)
        return TransferItem(
            local_path=path,
            key=resolve_key(target, path, self.config.strip_prefix),
            content_type=content_type,
            content_encoding=content_encoding,
            cache_control=cache_control
        )

    def run_upload(self) -> TransferResult:
        config = self.config
        target = normalize_target(config.target)
        s3_manager = self._get_s3_manager()

        logger.info(f"Attempting to upload - region: {config.region}, "
                    f"endpoint: {config.endpoint or 'default'}, bucket: {config.bucket}")

        try:
            matches = match_files(config.source, config.exclude)
        except GlobError as e:
            logger.error(f"Could not match files - error: {e}")
            raise

        result = TransferResult(mode=TransferMode.UPLOAD, dry_run=config.dry_run)

        for match in matches:
            try:
                is_dir = stat.S_ISDIR(os.stat(match).st_mode)
            except OSError as e:
                logger.warning(f"Skipping {match}, cannot stat: {e}")
                result.files_skipped += 1
                continue

            if is_dir:
                continue

            result.files_matched += 1
            item = self.build_upload_item(target, match)

            logger.info(f"Uploading file - name: {item.local_path}, bucket: {config.bucket}, "
                        f"target: {item.key}, content_type: {item.content_type}")

            # dry run stops after resolution and logging
            if config.dry_run:
                continue

            self._upload_item(s3_manager, item)
            result.files_transferred += 1

        logger.info(f"Upload completed - matched: {result.files_matched}, "
                    f"uploaded: {result.files_transferred}, dry_run: {config.dry_run}")
        return result

    def _upload_item(self, s3_manager: S3Manager, item: TransferItem) -> None:
        config = self.config
        try:
            body = open(item.local_path, 'rb')
        except OSError as e:
            logger.error(f"Problem opening file - file: {item.local_path}, error: {e}")
            raise LocalIOError(f"Problem opening file: {e}", bucket=config.bucket,
                               key=item.key, path=item.local_path) from e

        with body:
            try:
                s3_manager.put_object(
                    key=item.key,
                    body=body,
                    acl=config.access,
                    content_type=item.content_type,
                    content_encoding=item.content_encoding,
                    cache_control=item.cache_control,
                    server_side_encryption=config.encryption or None,
                    storage_class=config.storage_class or None
                )
            except OSError as e:
                logger.error(f"Failed to read file - file: {item.local_path}, error: {e}")
                raise LocalIOError(f"Failed to read file: {e}", bucket=config.bucket,
                                   key=item.key, path=item.local_path) from e

    def run_download(self) -> TransferResult:
        config = self.config
        target_dir = resolve_target_dir(config.target)
        s3_manager = self._get_s3_manager()

        logger.info(f"Listing S3 directory - bucket: {config.bucket}, dir: {target_dir}")
        objects = s3_manager.list_objects(target_dir)

        outcomes = self._download_all(s3_manager, target_dir, objects)
        error = self.first_error(outcomes)
        if error is not None:
            failed = sum(1 for _, _, outcome_error in outcomes if outcome_error is not None)
            logger.error(f"Download failed - {failed} of {len(outcomes)} objects failed")
            raise error

        result = TransferResult(mode=TransferMode.DOWNLOAD, files_matched=len(objects))
        for _, transferred, _ in outcomes:
            if transferred:
                result.files_transferred += 1
            else:
                result.files_skipped += 1

        logger.info(f"Download completed - downloaded: {result.files_transferred}, "
                    f"skipped: {result.files_skipped}")
        return result

    def _download_all(self, s3_manager: S3Manager, target_dir: str,
                      objects: List[S3Object]) -> List[DownloadOutcome]:
        """Download every object concurrently; outcomes are in completion order."""
        if not objects:
            return []

        outcomes: List[DownloadOutcome] = []
        with ThreadPoolExecutor(max_workers=len(objects)) as executor:
            futures = {}
            for obj in objects:
                logger.info(f"Getting S3 object - bucket: {self.config.bucket}, key: {obj.key}")
                future = executor.submit(self.download_object, s3_manager, target_dir, obj)
                futures[future] = obj.key

            for future in as_completed(futures):
                error = future.exception()
                transferred = future.result() if error is None else False
                outcomes.append((futures[future], transferred, error))

        return outcomes

    @staticmethod
    def first_error(outcomes: List[DownloadOutcome]) -> Optional[BaseException]:
        """Return the first error in outcome order, or None when all succeeded."""
        for _, _, error in outcomes:
            if error is not None:
                return error
        return None

    def download_object(self, s3_manager: S3Manager, target_dir: str, obj: S3Object) -> bool:
        """
        Fetch one object and write it to its mapped local path.

        Returns:
            bool: False when the key is a folder placeholder and nothing was written

        Raises:
            TransferError: If the object cannot be fetched or its body read
            LocalIOError: If the local file cannot be created or written
        """
        if obj.key.endswith('/'):
            logger.debug(f"Skipping folder placeholder: {obj.key}")
            return False

        body = s3_manager.get_object_stream(obj.key)
        source = resolve_source(target_dir, obj.key, self.config.strip_prefix)

        try:
            parent = os.path.dirname(source)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(source, 'wb') as f:
                shutil.copyfileobj(body, f)
        except OSError as e:
            logger.error(f"Failed to write file - file: {source}, key: {obj.key}, error: {e}")
            raise LocalIOError(f"Failed to write file: {e}", bucket=self.config.bucket,
                               key=obj.key, path=source) from e
        except BotoCoreError as e:
            logger.error(f"Failed to read S3 object body - key: {obj.key}, error: {e}")
            raise TransferError(f"Failed to read S3 object body: {e}", bucket=self.config.bucket,
                                key=obj.key, path=source) from e
        finally:
            body.close()

        logger.debug(f"Downloaded {obj.key} to {source}")
        return True


def execute(config: PluginConfig) -> TransferResult:
    """Run the sync step for ``config``; raises the first error encountered."""
    return TransferService(config).run()

