import sys
from unittest.mock import MagicMock

import pytest

from oss_filesystem.core.config import settings
from oss_filesystem.infrastructure.exceptions import StorageConfigError
from oss_filesystem.infrastructure.storage.object_storage.aliyun_oss_adapter import AliyunOssAdapter
from oss_filesystem.infrastructure.storage.object_storage.base import (
    DEFAULT_ENDPOINT,
    StorageConfig,
    region_from_endpoint,
)
from oss_filesystem.infrastructure.storage.object_storage.factory import (
    StorageFactory,
    create_aliyun_storage,
)
from oss_filesystem.infrastructure.storage.object_storage.oss_client import AliyunOssClient

VALID_CONFIG = {
    "access_key_id": "ak",
    "access_key_secret": "sk",
    "bucket": "test-bucket",
}


@pytest.mark.parametrize("missing, message", [
    ("access_key_id", "access_key_id"),
    ("access_key_secret", "access_key_secret"),
    ("bucket", "bucket"),
])
def test_required_fields(missing, message):
    config = {**VALID_CONFIG, missing: ""}

    with pytest.raises(StorageConfigError, match=message):
        create_aliyun_storage(config)


def test_missing_sdk_fails_fast(monkeypatch):
    monkeypatch.setitem(sys.modules, "minio", None)

    with pytest.raises(StorageConfigError, match="minio"):
        create_aliyun_storage(VALID_CONFIG)


def test_default_endpoint():
    storage = create_aliyun_storage(VALID_CONFIG)

    assert isinstance(storage, AliyunOssAdapter)
    assert isinstance(storage.client, AliyunOssClient)
    assert storage.bucket == "test-bucket"
    assert storage.config.endpoint == DEFAULT_ENDPOINT
    assert storage.config.region == "oss-cn-shenzhen"


def test_custom_endpoint_and_limits():
    storage = create_aliyun_storage({
        **VALID_CONFIG,
        "end_point": "oss-cn-hangzhou-internal.aliyuncs.com",
        "max_keys": 500,
        "access_timeout": 3600,
        "request_timeout": 10,
    })

    assert storage.config.endpoint == "oss-cn-hangzhou-internal.aliyuncs.com"
    assert storage.config.region == "oss-cn-hangzhou"
    assert storage.config.max_keys == 500
    assert storage.config.access_timeout == 3600


def test_config_input_is_not_modified():
    config = dict(VALID_CONFIG)
    create_aliyun_storage(config)

    assert config == VALID_CONFIG


def test_empty_limits_fall_back_to_defaults():
    config = StorageConfig.from_mapping({**VALID_CONFIG, "max_keys": 0, "access_timeout": None})

    assert config.max_keys == 100
    assert config.access_timeout == 60
    assert config.secure is True


@pytest.mark.parametrize("endpoint, region", [
    ("oss-cn-shenzhen.aliyuncs.com", "oss-cn-shenzhen"),
    ("https://oss-us-west-1.aliyuncs.com", "oss-us-west-1"),
    ("localhost:9000", None),
])
def test_region_from_endpoint(endpoint, region):
    assert region_from_endpoint(endpoint) == region


def test_unknown_driver():
    with pytest.raises(StorageConfigError, match="ftp"):
        StorageFactory.create_storage("ftp", VALID_CONFIG)


def test_extend_registers_driver():
    storage = MagicMock()
    creator = MagicMock(return_value=storage)

    StorageFactory.extend("Memory", creator)

    assert "memory" in StorageFactory.get_supported_drivers()
    assert StorageFactory.create_storage("memory", {"bucket": "b"}) is storage
    creator.assert_called_once_with({"bucket": "b"})


def test_extend_rejects_non_callable():
    with pytest.raises(StorageConfigError):
        StorageFactory.extend("broken", "not callable")


def test_create_storage_reads_settings(monkeypatch):
    monkeypatch.setattr(settings, "OSS_ACCESS_KEY_ID", "env-ak")
    monkeypatch.setattr(settings, "OSS_ACCESS_KEY_SECRET", "env-sk")
    monkeypatch.setattr(settings, "OSS_BUCKET", "env-bucket")

    storage = StorageFactory.create_storage()

    assert storage.bucket == "env-bucket"


def test_default_storage_is_shared(monkeypatch):
    creator = MagicMock(side_effect=lambda config: MagicMock())
    StorageFactory.extend("aliyun", creator)

    first = StorageFactory.get_default_storage()

    assert StorageFactory.get_default_storage() is first
    creator.assert_called_once()

    StorageFactory.reset_default_storage()
    assert StorageFactory.get_default_storage() is not first


def test_request_timeout_is_coerced():
    config = StorageConfig.from_mapping({**VALID_CONFIG, "request_timeout": "30"})

    assert config.request_timeout == 30


def test_string_request_timeout_builds_client():
    storage = create_aliyun_storage({**VALID_CONFIG, "request_timeout": "30"})

    assert storage.config.request_timeout == 30
