from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
import logging

from sales_reports.utils.exceptions import BaseAppException

logger = logging.getLogger(__name__)

async def error_handler_middleware(request: Request, call_next):
    """Global error handler middleware"""
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        return handle_error(e)

async def framework_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Routing and request-validation errors, which FastAPI answers before the middleware sees them"""
    return handle_error(exc)

def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(HTTPException, framework_exception_handler)
    app.add_exception_handler(RequestValidationError, framework_exception_handler)

def handle_error(error: Exception) -> JSONResponse:
    """Handle different types of errors"""

    if isinstance(error, BaseAppException):
        if error.status_code >= 500:
            logger.error(f"Application error: {error.message}", exc_info=error)
        else:
            logger.warning(f"Rejected request: {error.message}")
        return JSONResponse(
            status_code=error.status_code,
            content={
                "error": True,
                "message": error.message,
                "code": error.code,
                "details": error.details
            }
        )

    elif isinstance(error, HTTPException):
        return JSONResponse(
            status_code=error.status_code,
            content={
                "error": True,
                "message": error.detail,
                "code": "HTTP_ERROR",
                "details": {}
            },
            headers=getattr(error, "headers", None)
        )

    elif isinstance(error, RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": True,
                "message": "Validation error",
                "code": "REQUEST_VALIDATION_ERROR",
                "details": jsonable_encoder(error.errors())
            }
        )

    else:
        logger.error(f"Unexpected error: {str(error)}", exc_info=error)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": True,
                "message": "Internal server error",
                "code": "INTERNAL_ERROR"
            }
        )
