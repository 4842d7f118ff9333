import logging
import sys
from typing import Optional, Union

from .config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    配置日志输出

    Args:
        level: 日志级别, 为空时使用配置中的 LOG_LEVEL
    """
    if level is None:
        level = settings.LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True
    )
    # 降低底层HTTP库的日志级别，避免频繁输出
    logging.getLogger('urllib3').setLevel(logging.WARNING)
