from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional
from models.product_model import ApiInfo, StatusResponse
from routers import product_router
from utils.config import Settings, load_settings
from utils.dependencies import create_store
import logging

API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = None
        store = create_store(settings)
        try:
            await store.open()
            app.state.store = store
            logger.info(f"Products API started with the {store.name} backend")
        except Exception as e:
            logger.error(f"Service failed to start: {e}")
            await store.close()
        try:
            yield
        finally:
            if app.state.store:
                await app.state.store.close()
                app.state.store = None

    app = FastAPI(title="Products API", version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(product_router.router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(ResponseValidationError)
    async def response_validation_exception_handler(request: Request, exc: ResponseValidationError):
        logger.error(f"Stored product does not match the response model on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=500, content={"error": "Storage error"})

    @app.get("/", response_model=ApiInfo)
    async def api_info():
        return {"message": "Products API running", "version": API_VERSION}

    @app.get("/status", response_model=StatusResponse)
    async def check_status():
        store = app.state.store
        if not store:
            raise HTTPException(status_code=500, detail="Product store is not available")
        return {"status": "success", "message": f"Products API running on the {store.name} backend"}

    return app


settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
