#!/usr/bin/env python3
"""
Lingo Sprint 俄英翻译练习后端 - FastAPI 主应用入口
Description: 提供注册登录、级别/课程/句子查询、答题进度保存和AI错误解释的REST API
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app.config.settings import settings
from app.utils.logger import setup_logging
from app.utils.database import init_db, check_db_connection
from app.api.routes import auth, levels, lessons, progress, ai

# 设置日志
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理
    - 启动时初始化数据库
    """
    logger.info("初始化Lingo Sprint应用...")

    try:
        init_db()
        logger.info("数据库初始化完成")
    except Exception as e:
        logger.error(f"应用启动失败: {e}")
        raise

    logger.info("Lingo Sprint应用启动完成")

    yield  # 应用运行期间

    logger.info("Lingo Sprint应用已关闭")


def create_application() -> FastAPI:
    """创建并配置FastAPI应用实例"""

    app = FastAPI(
        title=settings.APP_NAME,
        description="分级课程的俄英翻译练习后端",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # 配置CORS中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 全局异常处理
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        logger.info(f"请求参数校验失败: {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request payload"}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logger.error(f"未处理的异常: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"}
        )

    # 注册API路由
    app.include_router(auth.router, prefix="/api", tags=["用户认证"])
    app.include_router(levels.router, prefix="/api", tags=["级别管理"])
    app.include_router(lessons.router, prefix="/api", tags=["课程管理"])
    app.include_router(progress.router, prefix="/api", tags=["学习进度"])
    app.include_router(ai.router, prefix="/api", tags=["AI解释"])

    return app


# 创建应用实例
app = create_application()


def _get_current_timestamp() -> str:
    """获取当前时间戳"""
    return datetime.now(timezone.utc).isoformat()


# 健康检查端点
@app.get("/")
async def root():
    """根端点 - 服务状态检查"""
    return {
        "status": "running",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": _get_current_timestamp()
    }


@app.get("/health")
async def health_check():
    """健康检查端点"""
    db_status = check_db_connection()

    return {
        "status": "healthy" if db_status else "unhealthy",
        "database": "connected" if db_status else "disconnected",
        "timestamp": _get_current_timestamp()
    }


if __name__ == "__main__":
    """开发环境直接运行"""
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8080,
        reload=True,  # 开发模式热重载
        log_level="info",
    )
