from fastapi import FastAPI
import logging

from .config import get_settings
from .api import api_router

settings = get_settings()

# 配置日誌
logging.basicConfig(level=getattr(logging, settings.app.log_level, logging.INFO))

app = FastAPI(
    title="Test Case Export Service",
    description="Recover LLM-generated test cases and export them as Markdown or Excel",
    version="1.0.0",
)

app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.app.host, port=settings.app.port)
