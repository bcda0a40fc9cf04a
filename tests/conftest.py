"""
Pytest configuration and fixtures for the bucket sync tests.
"""
import os
import pytest
from unittest.mock import Mock
from loguru import logger

from bucket_sync.clients.s3_manager import S3Manager


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove plugin and AWS settings inherited from the outer environment."""
    for name in list(os.environ):
        if name.startswith('PLUGIN_') or name.startswith('AWS_'):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def file_tree(tmp_path, monkeypatch):
    """Create a small build output tree and make it the working directory."""
    files = {
        'dist/index.html': b'<html></html>',
        'dist/js/app.js': b'console.log(1);',
        'dist/css/site.css': b'body {}',
        'fixtures/a.txt': b'a',
        'fixtures/b.txt': b'b',
        'fixtures/c.txt': b'c',
    }
    for relative, content in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def mock_s3_manager():
    """S3Manager stand-in with every call mocked."""
    return Mock(spec=S3Manager)


@pytest.fixture
def log_messages():
    """Collect formatted loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    yield messages
    logger.remove(handler_id)
