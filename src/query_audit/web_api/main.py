"""
FastAPI Application
===================
Main entry point for the query-audit API.

Run with:
    uvicorn query_audit.web_api.main:app --reload
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from query_audit import __version__
from query_audit.web_api.config import settings
from query_audit.web_api.routers import health, lint, rules

app = FastAPI(
    title="query-audit API",
    description="Static checks for Testing Library async queries",
    version=__version__,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(rules.router, tags=["Rules"])
app.include_router(lint.router, prefix="/lint", tags=["Lint"])


@app.get("/")
async def root():
    """Root endpoint - API info"""
    return {
        "name": "query-audit API",
        "version": __version__,
        "docs": "/docs" if settings.DEBUG else "disabled",
    }


# For running directly: python -m query_audit.web_api.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
