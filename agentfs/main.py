"""
HTTP application exposing the workspace mutation engine and plan runner.
"""

import logging

from fastapi import FastAPI

from agentfs.api.routers import router as api_router
from agentfs.config.settings import settings

# Create FastAPI app
app = FastAPI(title="agentfs Workspace API")
app.include_router(api_router)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)
logger.info(f"Workspace root: {settings.workspace_root}")
