"""FastAPI application for Recipe Proxy."""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

import httpx
from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.handlers import HandlerResult, generate_recipe, lookup_image
from app.core.image_search import GoogleImageSearch, build_image_search
from app.core.recipe_source import RecipeSource, build_recipe_source
from config.settings import Settings, get_settings

logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,HEAD,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

# Both paths answer any method and read only the query string.
ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class PrettyJSONResponse(JSONResponse):
    """JSON response indented by two spaces, keys in insertion order."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, allow_nan=False, indent=2).encode("utf-8")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} {settings.app_version}...")

    http_client = httpx.AsyncClient(timeout=settings.search_timeout)
    app.state.image_search = build_image_search(settings, http_client)
    app.state.recipe_source = build_recipe_source(settings)
    logger.info(
        f"Recipe source ready: {app.state.recipe_source.get_model_name()} "
        f"({settings.recipe_variant} schema, strict errors: {settings.strict_errors})"
    )

    yield

    logger.info("Shutting down Recipe Proxy...")
    await app.state.recipe_source.aclose()
    await http_client.aclose()


app = FastAPI(
    title="Recipe Proxy API",
    description="Generates structured recipes and finds food images through third-party APIs",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "HEAD", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    """Attach the cross-origin headers to every response."""
    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Answer unknown paths with a plain-text 404."""
    if exc.status_code == 404:
        return PlainTextResponse("Not found", status_code=404)
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)


def get_recipe_source(request: Request) -> RecipeSource:
    """Recipe source created at startup."""
    return request.app.state.recipe_source


def get_image_search(request: Request) -> GoogleImageSearch:
    """Image search client created at startup."""
    return request.app.state.image_search


def _to_response(result: HandlerResult) -> JSONResponse:
    response_class = PrettyJSONResponse if result.pretty else JSONResponse
    return response_class(result.body, status_code=result.status_code)


@app.api_route("/getRecipe", methods=ROUTE_METHODS, tags=["Recipes"])
async def get_recipe(
    food_name: Optional[str] = Query(None, alias="foodName", description="Dish to generate a recipe for"),
    source: RecipeSource = Depends(get_recipe_source),
    settings: Settings = Depends(get_settings)
):
    """
    Generate a structured recipe.

    - **foodName**: Free-text name of the dish
    """
    result = await generate_recipe(source, food_name, strict=settings.strict_errors)
    return _to_response(result)


@app.api_route("/getImage", methods=ROUTE_METHODS, tags=["Images"])
async def get_image(
    food_or_ing_name: Optional[str] = Query(None, alias="foodOrIngName", description="Food or ingredient to picture"),
    search: GoogleImageSearch = Depends(get_image_search),
    settings: Settings = Depends(get_settings)
):
    """
    Find an image for a food or ingredient.

    - **foodOrIngName**: Free-text name of the food or ingredient
    """
    result = await lookup_image(search, food_or_ing_name, strict=settings.strict_errors)
    return _to_response(result)


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
