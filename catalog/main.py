# catalog/main.py
import re
from typing import Any, List, Optional

from fastapi import Body, Depends, FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from .config import Settings, get_settings
from .database import CatalogStore
from .errors import BadRequest, CatalogError
from .log import configure_logging
from .models import INT32_MAX, INT32_MIN, Category, Product, ProductIn, StockUpdateRequest


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


_ID_PATTERN = re.compile(r"[+-]?\d+")


def _parse_id(raw: str) -> int:
    # plain decimal integers only; int() alone would accept " 1" and "1_0"
    if not _ID_PATTERN.fullmatch(raw):
        raise BadRequest("Invalid ID")
    value = int(raw)
    if not INT32_MIN <= value <= INT32_MAX:
        raise BadRequest("Invalid ID")
    return value


def _read_body(model, body):
    # Bodies of PUT and stock routes are validated after the target is
    # known to exist, so a missing id answers 404 even for a bad body.
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from None


# ---------------------------
# Error handlers
# ---------------------------
async def catalog_error_handler(request: Request, exc: CatalogError):
    logger.warning("{} {} -> {} {}", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # malformed bodies are bad requests too, not FastAPI's default 422
    logger.warning("{} {} -> 400 invalid request", request.method, request.url.path)
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


# ---------------------------
# App factory
# ---------------------------
def create_app(store: Optional[CatalogStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, diagnose=settings.environment != "production")

    app = FastAPI(title=settings.app_title)
    app.state.store = store if store is not None else CatalogStore()
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Route functions are plain defs: FastAPI runs them on its threadpool
    # and the store locks serialize each operation.

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    # ---------------------------
    # Category endpoints
    # ---------------------------
    @app.get("/categories", response_model=List[Category])
    def list_categories(store: CatalogStore = Depends(get_store)):
        return store.categories.list_all()

    @app.get("/categories/{category_id}", response_model=Category)
    def get_category(category_id: str, store: CatalogStore = Depends(get_store)):
        return store.categories.get(_parse_id(category_id))

    @app.post("/categories", response_model=Category, status_code=201)
    def create_category(payload: Category, store: CatalogStore = Depends(get_store)):
        return store.categories.create(payload)

    @app.put("/categories/{category_id}", response_model=Category)
    def update_category(category_id: str, body: Any = Body(None), store: CatalogStore = Depends(get_store)):
        cid = _parse_id(category_id)
        store.categories.get(cid)
        return store.categories.update(cid, _read_body(Category, body))

    @app.delete("/categories/{category_id}", status_code=204)
    def delete_category(category_id: str, store: CatalogStore = Depends(get_store)):
        store.categories.delete(_parse_id(category_id))
        return Response(status_code=204)

    # ---------------------------
    # Product endpoints
    # ---------------------------
    @app.get("/products", response_model=List[Product])
    def list_products(store: CatalogStore = Depends(get_store)):
        return store.products.list_all()

    @app.get("/products/{product_id}", response_model=Product)
    def get_product(product_id: str, store: CatalogStore = Depends(get_store)):
        return store.products.get(_parse_id(product_id))

    @app.post("/products", response_model=Product, status_code=201)
    def create_product(payload: ProductIn, store: CatalogStore = Depends(get_store)):
        return store.products.create(payload)

    @app.put("/products/{product_id}", response_model=Product)
    def update_product(product_id: str, body: Any = Body(None), store: CatalogStore = Depends(get_store)):
        pid = _parse_id(product_id)
        store.products.get(pid)
        return store.products.update(pid, _read_body(ProductIn, body))

    @app.delete("/products/{product_id}", status_code=204)
    def delete_product(product_id: str, store: CatalogStore = Depends(get_store)):
        store.products.delete(_parse_id(product_id))
        return Response(status_code=204)

    # ---------------------------
    # Stock endpoints
    # ---------------------------
    @app.post("/products/{product_id}/add-stock", response_model=Product)
    def add_stock(product_id: str, body: Any = Body(None), store: CatalogStore = Depends(get_store)):
        pid = _parse_id(product_id)
        store.products.get(pid)
        return store.products.add_stock(pid, _read_body(StockUpdateRequest, body).quantityToAdd)

    @app.post("/products/{product_id}/reduce-stock", response_model=Product)
    def reduce_stock(product_id: str, body: Any = Body(None), store: CatalogStore = Depends(get_store)):
        pid = _parse_id(product_id)
        store.products.get(pid)
        return store.products.reduce_stock(pid, _read_body(StockUpdateRequest, body).quantityToAdd)

    # ---------------------------
    # Utility: reset (for tests/demo)
    # ---------------------------
    if settings.enable_reset:
        @app.post("/reset")
        def reset_all(store: CatalogStore = Depends(get_store)):
            store.reset()
            return {"status": "reset"}

    logger.debug("Catalog app created ({})", settings.environment)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
