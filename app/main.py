"""
Product Page Extractor - FastAPI Application
Main entry point with REST API endpoints.
"""
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from app.config import config
from app.errors import FetchFailed, FetchTimeout, IdentifierNotFound
from app.layers.ingestion import IngestionLayer
from app.utils.logger import get_logger, set_trace_id

SERVICE_NAME = "AliExpress Product API"
SERVICE_VERSION = "1.0.0"
INVALID_URL_MESSAGE = "Please provide a valid AliExpress product URL"


# Initialize FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Extracts a normalized product record from a product page URL",
    version=SERVICE_VERSION,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize layers
ingestion_layer = IngestionLayer()

logger = get_logger("main")


# Request models
class ProductRequest(BaseModel):
    """Request model for product extraction."""
    url: Optional[str] = None


def error_response(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    """Build the failure envelope shared by every endpoint."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "message": message or error,
        },
    )


# API Routes
@app.get("/")
async def service_info():
    """Service descriptor."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "endpoints": {
            "fetchProduct": "POST /api/aliexpress/product",
            "health": "GET /healthz",
        },
    }


@app.get("/healthz", response_class=PlainTextResponse)
async def health_check():
    """Health check endpoint."""
    return "ok"


@app.post("/api/aliexpress/product")
async def fetch_product(request: ProductRequest):
    """
    Fetch a product page and return its normalized record.

    The URL must point at an AliExpress item page.
    """
    trace_id = set_trace_id()
    url = (request.url or "").strip()

    if not url:
        return error_response(400, "URL is required", INVALID_URL_MESSAGE)

    if "aliexpress.com" not in url or "/item/" not in url:
        logger.info("product_request_rejected", url=url, reason="invalid_url", trace_id=trace_id)
        return error_response(400, "Invalid URL", INVALID_URL_MESSAGE)

    logger.info("product_request", url=url, trace_id=trace_id)

    try:
        product = await ingestion_layer.ingest(url)
    except IdentifierNotFound as e:
        return error_response(400, e.message, INVALID_URL_MESSAGE)
    except FetchTimeout as e:
        logger.warning("product_fetch_timeout", url=url, timeout=e.timeout)
        return error_response(504, e.message)
    except FetchFailed as e:
        logger.warning("product_fetch_failed", url=url, status_code=e.status_code, error=str(e.cause))
        return error_response(502, e.message)
    except Exception as e:
        logger.error("product_request_error", url=url, error=str(e), error_type=type(e).__name__)
        return error_response(500, str(e) or "Failed to fetch product data")

    logger.info(
        "product_extracted",
        url=url,
        title=product.title,
        price=product.sale_price,
        images_count=len(product.images),
        rating=product.rating,
        reviews=product.reviews,
    )

    return {"success": True, "data": product.to_response()}


@app.get("/api/aliexpress/product")
async def product_method_not_allowed():
    """Explain how to call the product endpoint."""
    return error_response(
        405,
        "Method not allowed",
        'Please use POST method with JSON body: { "url": "https://aliexpress.com/item/..." }',
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
