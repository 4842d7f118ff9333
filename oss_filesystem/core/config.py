import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
env_path = os.path.join(project_root, '.env')
load_dotenv(env_path)

class Settings(BaseSettings):
    # 基本设置
    PROJECT_NAME: str = "oss-filesystem"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # 默认使用的存储驱动
    OSS_DRIVER: str = os.getenv("OSS_DRIVER", "aliyun")

    # 阿里云OSS配置
    OSS_ACCESS_KEY_ID: str = os.getenv("OSS_ACCESS_KEY_ID", "")
    OSS_ACCESS_KEY_SECRET: str = os.getenv("OSS_ACCESS_KEY_SECRET", "")
    OSS_BUCKET: str = os.getenv("OSS_BUCKET", "")
    # 为空时使用深圳节点
    OSS_ENDPOINT: str = os.getenv("OSS_ENDPOINT", "")
    OSS_REGION: Optional[str] = os.getenv("OSS_REGION", None)
    OSS_SECURE: bool = True

    # 列举文件时每页返回的数量
    OSS_MAX_KEYS: int = int(os.getenv("OSS_MAX_KEYS", 100))
    # 签名URL的有效期(秒)
    OSS_ACCESS_TIMEOUT: int = int(os.getenv("OSS_ACCESS_TIMEOUT", 60))
    # 单次请求的超时时间(秒), 为空时使用SDK默认值
    OSS_REQUEST_TIMEOUT: Optional[int] = None

    @property
    def OSS_CONFIG(self) -> Dict[str, Any]:
        """
        获取OSS驱动配置
        """
        return {
            "access_key_id": self.OSS_ACCESS_KEY_ID,
            "access_key_secret": self.OSS_ACCESS_KEY_SECRET,
            "bucket": self.OSS_BUCKET,
            "end_point": self.OSS_ENDPOINT,
            "region": self.OSS_REGION,
            "secure": self.OSS_SECURE,
            "max_keys": self.OSS_MAX_KEYS,
            "access_timeout": self.OSS_ACCESS_TIMEOUT,
            "request_timeout": self.OSS_REQUEST_TIMEOUT,
        }

    class Config:
        case_sensitive = True
        env_file = ".env"


# 创建设置实例
settings = Settings()
