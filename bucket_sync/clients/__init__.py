# Client packages
from .s3_manager import S3Manager, S3Object, create_s3_client

__all__ = ['S3Manager', 'S3Object', 'create_s3_client']
