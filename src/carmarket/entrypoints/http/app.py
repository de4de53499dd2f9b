import os

import uvicorn
from fastapi import FastAPI

from carmarket.entrypoints.http.exception_handlers import register_exception_handlers
from carmarket.entrypoints.http.routes.assistant import router as assistant_router
from carmarket.entrypoints.http.routes.health import router as health_router
from carmarket.entrypoints.http.routes.listings import router as listings_router
from carmarket.entrypoints.http.routes.search import router as search_router


def build_app() -> FastAPI:
    app = FastAPI(
        title="CarMarket Search API",
        description="""
        Faceted search and shopping assistant for a used-car marketplace.

        ## Features
        - Search approved listings with facets, sorting and pagination
        - Look up a single listing
        - Ask the assistant in plain language ("Toyota SUVs under $30,000")

        ## Authentication
        Search is public; no authentication required.

        ## Error Handling
        All errors return structured JSON responses with error codes.
        Malformed search parameters are reported in `ignoredFields`
        instead of failing the request.
        """,
        version="0.1.0",
        docs_url="/docs",  # Swagger UI
        redoc_url="/redoc",  # ReDoc alternative
        openapi_url="/openapi.json",  # OpenAPI schema
        contact={
            "name": "CarMarket Team",
            "email": "dev@carmarket.example",
        },
        license_info={
            "name": "Proprietary",
        },
    )

    # Register global exception handlers
    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(search_router)
    app.include_router(listings_router)
    app.include_router(assistant_router)

    return app


app = build_app()


def serve() -> None:
    """Run the API with uvicorn; bound to API_HOST and API_PORT."""
    uvicorn.run(
        "carmarket.entrypoints.http.app:app",
        host=os.environ.get("API_HOST", "0.0.0.0"),
        port=int(os.environ.get("API_PORT", "8000")),
    )


if __name__ == "__main__":
    serve()
