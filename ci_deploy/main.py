from fastapi import FastAPI

from ci_deploy import __version__
from ci_deploy.apps.api import router

app = FastAPI(
    title="CI Deploy API",
    version=__version__,
    description="Change detection and compose deployment helpers for build servers",
)

app.include_router(router.router, prefix="/api")


@app.get("/health")
async def health_check():
    """
    Simple health check endpoint to confirm the API is running.
    """
    return {"status": "ok"}
