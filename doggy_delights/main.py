from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn
import logging

from doggy_delights.storage.s3 import S3Service
from doggy_delights.settings import settings
from doggy_delights.routers.gallery import router as gallery_router
from doggy_delights.exceptions import add_exception_handlers

logging.basicConfig(level=settings.log_level)
log = logging.getLogger("doggy-delights")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
        Async context manager for FastAPI application lifecycle events.
        Opens the object store client for the application.
    """
    app.state.s3 = S3Service()
    yield
    app.state.s3.close()

# Initialize App
app = FastAPI(
    title=settings.app_title,
    lifespan=lifespan,
    description="Dog photo upload and gallery service",
)

# Add exception handlers
add_exception_handlers(app)

# CORS - Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Served both at the root and under /api
app.include_router(gallery_router)
app.include_router(gallery_router, prefix="/api")

# Check Health
@app.get("/")
def read_root():
    """
        Default end point

    """
    return "Doggy Delights is running."

if __name__ == "__main__":
    uvicorn.run("doggy_delights.main:app", host=settings.host, port=settings.port)
