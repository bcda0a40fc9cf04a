"""
Main entry point for the bucket sync step.
"""
import json
import os
import sys
from loguru import logger

from .exceptions import BucketSyncError
from .models.config import PluginConfig
from .models.data_models import TransferResult
from .services.transfer_service import TransferService


def setup_logging(level: str = "INFO"):
    """Configure logging for the sync step."""
    # Remove default logger
    logger.remove()

    # Build logs are read from stderr only
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level.upper()
    )


def run_sync() -> TransferResult:
    """Load configuration from the environment and run one sync pass."""
    config = PluginConfig.from_env()
    mode = "download" if config.download else "upload"
    logger.info(f"Starting bucket sync - mode: {mode}, bucket: {config.bucket}, dry_run: {config.dry_run}")

    result = TransferService(config).run()

    logger.info(f"Sync Results: {json.dumps(result.to_dict(), indent=2)}")
    return result


def print_help():
    """Print help information for the CLI."""
    help_text = """
Bucket Sync - Command Line Interface

USAGE:
    python -m bucket_sync.main [COMMAND]

COMMANDS:
    run     Upload matched files, or download the target prefix (default)
    help    Show this help message

ENVIRONMENT VARIABLES:
    PLUGIN_BUCKET                    Bucket name (required)
    PLUGIN_ENDPOINT                  S3 compatible endpoint URL
    PLUGIN_REGION                    Region (default: us-east-1)
    PLUGIN_ACCESS_KEY                Access key (falls back to AWS_ACCESS_KEY_ID)
    PLUGIN_SECRET_KEY                Secret key (falls back to AWS_SECRET_ACCESS_KEY)
    PLUGIN_ASSUME_ROLE               Role ARN to assume when no keys are given
    PLUGIN_ASSUME_ROLE_SESSION_NAME  Session name for assumed roles (default: drone)
    PLUGIN_USER_ROLE_ARN             Role ARN assumed on top of the base session
    PLUGIN_SOURCE                    Glob selecting files to upload (upload mode)
    PLUGIN_TARGET                    Key prefix to upload to / download from
    PLUGIN_STRIP_PREFIX              Prefix removed from local paths
    PLUGIN_EXCLUDE                   Comma separated globs removed from the upload set
    PLUGIN_ACL                       Object ACL (default: private)
    PLUGIN_ENCRYPTION                Server-side encryption, e.g. AES256 or aws:kms
    PLUGIN_STORAGE_CLASS             Storage class for uploaded objects
    PLUGIN_CONTENT_TYPE              JSON map of regex -> content type
    PLUGIN_CONTENT_ENCODING          JSON map of regex -> content encoding
    PLUGIN_CACHE_CONTROL             JSON map of regex -> cache control
    PLUGIN_PATH_STYLE                Use path style addressing (default: false)
    PLUGIN_DOWNLOAD                  Download the target prefix instead (default: false)
                                     Keys ending in "/" are folder placeholders and are skipped
    PLUGIN_DRY_RUN                   Resolve and log without uploading (default: false)
    PLUGIN_LOG_LEVEL                 Log level (default: INFO)
"""
    print(help_text)


def main():
    """Main entry point; exits non-zero when any transfer failed."""
    setup_logging(os.getenv("PLUGIN_LOG_LEVEL", "INFO"))

    command = sys.argv[1].lower() if len(sys.argv) > 1 else "run"

    try:
        if command in ["help", "--help", "-h"]:
            print_help()
        elif command == "run":
            run_sync()
            logger.info("Bucket sync completed successfully")
        else:
            logger.error(f"Unknown command: {command}")
            logger.error("Use 'help' to see available commands")
            print_help()
            sys.exit(1)

    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down")
        sys.exit(1)
    except BucketSyncError as e:
        logger.error(f"Bucket sync failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
