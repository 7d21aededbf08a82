"""
数据库连接和会话管理

引擎和会话工厂由应用工厂创建并挂在 app.state 上，
请求通过 get_db 依赖拿到独立的会话。
"""
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

# 创建Base类
Base = declarative_base()


def create_engine_from_url(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    创建异步引擎

    SQLite（本地开发/测试）不支持连接池大小参数
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)

    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """创建会话工厂"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def init_models(engine: AsyncEngine):
    """根据模型建表（不做迁移）"""
    # 确保所有模型都已注册到 Base.metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncSession:
    """
    获取数据库会话依赖
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
