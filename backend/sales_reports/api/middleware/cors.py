from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI
from sales_reports.config import settings

def setup_cors(app: FastAPI):
    """Allow the dashboard frontend to call the read-only report API"""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600
    )
