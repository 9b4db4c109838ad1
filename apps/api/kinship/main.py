from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html

from kinship.core.config import settings
from kinship.core.db import engine
from kinship.core.logging_config import configure_logging
from kinship.routers import audit, family_members, family_relationships, family_tree, health


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    yield
    # Connections are pooled process-wide; release them on shutdown.
    engine.dispose()


app = FastAPI(
    title="Family Association API",
    version="1.0.0",
    description="API for family members, relationship graph, and family-tree views.",
    # Served behind a path prefix at the edge; /docs is provided below with the prefixed openapi URL.
    docs_url=None,
    root_path=settings.root_path,
    lifespan=lifespan,
)


@app.get("/docs", include_in_schema=False)
def swagger_ui():
    prefix = (settings.root_path or "").rstrip("/")
    openapi_url = f"{prefix}{app.openapi_url}"
    return get_swagger_ui_html(openapi_url=openapi_url, title=f"{app.title} - Docs")


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(family_members.router)
app.include_router(family_relationships.router)
app.include_router(family_tree.router)
app.include_router(audit.router)
