"""
Offline Order API server runner
Run: python run_server.py (or uvicorn offline_orders.main:app)
"""

import logging
import sys

import uvicorn

from offline_orders.config import PORT

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info(f"🚀 Starting Offline Order API on port {PORT}...")
    try:
        uvicorn.run("offline_orders.main:app", host="0.0.0.0", port=PORT)
    except KeyboardInterrupt:
        logger.info("👋 Server stopped by user")
