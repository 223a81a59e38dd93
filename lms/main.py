"""FastAPI 入口：应用工厂、日志、异常处理与启动时建表/迁移。"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lms.api import router as api_router
from lms.config import get_settings
from lms.db import Base, engine
from lms.errors import register_exception_handlers
from lms.migrations import run_migrations, unknown_grade_statuses

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    """应用工厂，便于测试与拓展路由。"""

    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title="LMS API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router)

    @app.on_event("startup")
    def init_models() -> None:
        """启动时确保表存在并执行增量迁移。"""

        Base.metadata.create_all(bind=engine)
        run_migrations(engine)
        unknown = unknown_grade_statuses(engine)
        if unknown:
            logger.warning("Grades with non-canonical status values: %s", sorted(unknown))
        logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))

    @app.get("/")
    def root() -> dict[str, str]:
        return {"message": "Backend is running"}

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
