from unittest.mock import MagicMock

import pytest

from oss_filesystem.infrastructure.storage.object_storage.aliyun_oss_adapter import AliyunOssAdapter
from oss_filesystem.infrastructure.storage.object_storage.base import StorageConfig
from oss_filesystem.infrastructure.storage.object_storage.factory import StorageFactory


@pytest.fixture
def storage_config():
    return StorageConfig(
        access_key_id="ak",
        access_key_secret="sk",
        bucket="test-bucket",
        max_keys=2,
        access_timeout=120,
    )


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def adapter(client, storage_config):
    return AliyunOssAdapter(client, "test-bucket", storage_config)


@pytest.fixture(autouse=True)
def clean_factory(monkeypatch):
    monkeypatch.setattr(StorageFactory, "_drivers", dict(StorageFactory._drivers))
    StorageFactory.reset_default_storage()
    yield
    StorageFactory.reset_default_storage()
