from fastapi import FastAPI
from contextlib import asynccontextmanager

from sales_reports.api.middleware import error_handler_middleware, register_exception_handlers, setup_cors
from sales_reports.api.routes import reports
from sales_reports.config import settings
from sales_reports.database.connection import DatabaseManager
from sales_reports.utils.exceptions import BaseAppException
from sales_reports.utils.logger import setup_logger

# Setup logging
logger = setup_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    logger.info(f"Starting {settings.PROJECT_NAME}...")
    logger.info(f"Database configuration present: {settings.has_database_config}")

    # The engine is created lazily on the first report query

    yield

    # Cleanup
    logger.info(f"Shutting down {settings.PROJECT_NAME}...")
    await DatabaseManager.close()

def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Sales reporting backend: KPIs, revenue over time, top products and store comparison",
        version="1.0.0",
        lifespan=lifespan
    )

    # CORS goes outermost so error responses carry its headers too
    app.middleware("http")(error_handler_middleware)
    register_exception_handlers(app)
    setup_cors(app)

    app.include_router(reports.router, prefix=f"{settings.API_V1_STR}/reports", tags=["reports"])

    @app.get("/")
    async def root():
        return {
            "message": f"{settings.PROJECT_NAME} API",
            "version": "1.0.0",
            "reports": [
                "kpis",
                "revenue-over-time",
                "top-products",
                "store-comparison",
                "dashboard",
                "channels",
                "stores",
            ]
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        health_status = {
            "status": "healthy",
            "services": {
                "api": "operational",
                "database_configured": settings.has_database_config,
                "database": "unknown"
            }
        }

        if not settings.has_database_config:
            health_status["status"] = "degraded"
            health_status["services"]["database"] = "not configured"
            return health_status

        try:
            reachable = await DatabaseManager.ping()
            health_status["services"]["database"] = "operational" if reachable else "unexpected response"
        except BaseAppException as e:
            logger.warning(f"Database health check failed: {e.message}")
            health_status["status"] = "degraded"
            health_status["services"]["database"] = "unreachable"

        return health_status

    return app

app = create_app()
