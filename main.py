"""
博客后端 - FastAPI应用主入口
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.database import create_engine_from_url, create_session_factory, init_models
from app.api import articles, genres, comments

logger = logging.getLogger(__name__)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """
    创建FastAPI应用

    数据库引擎在这里创建并挂到 app.state，应用关闭时释放。
    """
    setup_logging(settings.LOG_LEVEL)

    engine = create_engine_from_url(database_url or settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.AUTO_CREATE_TABLES:
            await init_models(engine)
            logger.info("数据库表已同步")
        yield
        await engine.dispose()
        logger.info("数据库连接已释放")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="博客后端API：文章、分类、评论与浏览统计",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # 配置CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("请求处理失败: %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"code": 500, "message": "服务器内部错误"}
        )

    # 注册路由
    app.include_router(articles.router)
    app.include_router(genres.router)
    app.include_router(comments.router)

    @app.get("/")
    async def root():
        """根路径"""
        return {
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "message": "博客后端API正在运行"
        }

    @app.get("/health")
    async def health_check():
        """健康检查"""
        return {"status": "healthy"}

    return app


if __name__ == "__main__":
    import uvicorn
    # 工厂模式：只在服务进程里创建应用和数据库引擎
    uvicorn.run(
        "main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
