"""
应用配置文件
"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """应用配置"""

    # 应用基本配置
    APP_NAME: str = "Blog API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 数据库配置
    DB_USERNAME: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "blog"
    # 完整连接串（设置后忽略上面的分项配置，测试时用于切换到SQLite）
    DATABASE_URL_OVERRIDE: Optional[str] = None
    # 启动时自动建表（无迁移工具，仅用于开发环境）
    AUTO_CREATE_TABLES: bool = False

    # JWT配置
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # CORS配置
    CORS_ORIGINS: list = ["*"]

    # 分页与推荐
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    RELATED_ARTICLES_LIMIT: int = 5

    # 媒体存储（S3兼容）
    S3_BUCKET_NAME: Optional[str] = None
    S3_REGION_NAME: Optional[str] = None
    S3_ACCESS_KEY_ID: Optional[str] = None
    S3_SECRET_ACCESS_KEY: Optional[str] = None
    S3_ENDPOINT_URL: Optional[str] = None
    S3_PUBLIC_BASE_URL: Optional[str] = None  # 为空时使用 https://{bucket}.s3.{region}.amazonaws.com
    MEDIA_FOLDER: str = "articles"

    @property
    def DATABASE_URL(self) -> str:
        """获取数据库连接URL"""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.DB_USERNAME}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def media_storage_enabled(self) -> bool:
        return bool(self.S3_BUCKET_NAME)

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
