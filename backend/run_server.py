"""
Run the indicator engine backend server.
"""
import logging
import os
import sys

# Set working directory and path
backend_dir = os.path.dirname(os.path.abspath(__file__))
os.chdir(backend_dir)
sys.path.insert(0, backend_dir)

# Load environment before settings are read
from dotenv import load_dotenv
load_dotenv(os.path.join(backend_dir, ".env"))

import uvicorn

from indicator_engine.core.config import settings, configure_logging

logger = logging.getLogger("run_server")

if __name__ == "__main__":
    configure_logging()
    logger.info("Starting Indicator Engine Server...")
    logger.info(f"Working directory: {backend_dir}")
    logger.info(f"API Docs: http://localhost:{settings.port}/docs")

    uvicorn.run(
        "indicator_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
