"""
Object Storage Factory

Validates driver configuration and creates filesystem adapters.
"""

import importlib.util
import logging
from typing import Any, Callable, Dict, Mapping, Optional

import urllib3

from oss_filesystem.core.config import settings
from ...exceptions import StorageConfigError
from .base import CloudFilesystem, StorageConfig, DEFAULT_ENDPOINT

logger = logging.getLogger(__name__)

DriverCreator = Callable[[Mapping[str, Any]], CloudFilesystem]


def create_aliyun_storage(config: Mapping[str, Any]) -> CloudFilesystem:
    """
    Create an Aliyun OSS adapter from a driver config dict

    Args:
        config: access_key_id, access_key_secret, bucket and optional
            end_point, region, secure, max_keys, access_timeout, request_timeout

    Raises:
        StorageConfigError: SDK missing or a required field is empty
    """
    if importlib.util.find_spec("minio") is None:
        raise StorageConfigError('依赖"minio",请安装后再试')

    if not config.get("access_key_id"):
        raise StorageConfigError("阿里云oss access_key_id 不能为空")

    if not config.get("access_key_secret"):
        raise StorageConfigError("阿里云oss access_key_secret 不能为空")

    if not config.get("bucket"):
        raise StorageConfigError("bucket不允许为空")

    if not (config.get("end_point") or config.get("endpoint")):
        # 默认使用深圳节点
        config = {**config, "end_point": DEFAULT_ENDPOINT}

    storage_config = StorageConfig.from_mapping(config)

    from .aliyun_oss_adapter import AliyunOssAdapter
    from .oss_client import AliyunOssClient

    http_client = None
    if storage_config.request_timeout:
        http_client = urllib3.PoolManager(
            timeout=urllib3.Timeout(
                connect=storage_config.request_timeout,
                read=storage_config.request_timeout
            ),
            retries=urllib3.Retry(
                total=5,
                backoff_factor=0.2,
                status_forcelist=[500, 502, 503, 504]
            )
        )

    client = AliyunOssClient(
        endpoint=storage_config.endpoint,
        access_key=storage_config.access_key_id,
        secret_key=storage_config.access_key_secret,
        secure=storage_config.secure,
        region=storage_config.region,
        http_client=http_client
    )

    logger.info(f"创建阿里云OSS存储: {storage_config.endpoint}/{storage_config.bucket}")
    return AliyunOssAdapter(client, storage_config.bucket, storage_config)


class StorageFactory:
    """Factory for creating filesystem adapters by driver name"""

    _drivers: Dict[str, DriverCreator] = {
        "aliyun": create_aliyun_storage,
    }

    _default_storage: Optional[CloudFilesystem] = None

    @classmethod
    def extend(cls, name: str, creator: DriverCreator) -> None:
        """
        Register a driver

        Args:
            name: Driver name used in configuration
            creator: Callable building an adapter from a config dict
        """
        if not callable(creator):
            raise StorageConfigError("驱动创建函数必须可调用")

        cls._drivers[name.lower()] = creator
        logger.info(f"注册存储驱动: {name}")

    @classmethod
    def create_storage(
        cls,
        driver: str = "aliyun",
        config: Optional[Mapping[str, Any]] = None
    ) -> CloudFilesystem:
        """
        Create filesystem adapter for a driver

        Args:
            driver: Registered driver name
            config: Driver config dict, read from settings when omitted

        Returns:
            CloudFilesystem implementation
        """
        creator = cls._drivers.get(driver.lower())
        if creator is None:
            raise StorageConfigError(f"不支持的存储驱动: {driver}")

        if config is None:
            config = cls._get_default_config()

        return creator(config)

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """Get default configuration from settings"""
        return settings.OSS_CONFIG

    @classmethod
    def get_supported_drivers(cls) -> list:
        """获取支持的存储驱动列表"""
        return list(cls._drivers.keys())

    @classmethod
    def get_default_storage(cls) -> CloudFilesystem:
        """Get the shared storage instance for the configured driver"""
        if cls._default_storage is None:
            cls._default_storage = cls.create_storage(settings.OSS_DRIVER)
        return cls._default_storage

    @classmethod
    def reset_default_storage(cls) -> None:
        cls._default_storage = None
