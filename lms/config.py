"""应用配置管理。

使用 Pydantic Settings 统一读取环境变量，便于在本地/生产之间切换。
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """核心配置项。

    - ``database_url``：默认使用本地 SQLite，便于快速启动。
    - ``secret_key``：Token 签名密钥，生产环境必须通过环境变量覆盖。
    - ``token_expire_days``：Token 有效期（天）。
    """

    database_url: str = Field(
        default="sqlite:///./storage/lms.db", description="SQLAlchemy 数据库 URL"
    )
    secret_key: str = Field(
        default="change-me-in-production", description="Token HMAC 签名密钥"
    )
    token_expire_days: int = Field(default=7, description="Token 有效期（天）")
    log_level: str = Field(default="INFO", description="根日志级别")
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="允许的跨域来源，逗号分隔",
    )

    model_config = {
        "env_prefix": "LMS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @property
    def cors_origin_list(self) -> List[str]:
        return [item.strip() for item in self.cors_origins.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """缓存后的全局配置实例。"""

    return Settings()
