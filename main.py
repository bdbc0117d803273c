"""Entry point for running the Atlasic API server via ``python main.py``."""

import os

import uvicorn

from atlasic.config import settings

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(
        "atlasic.api.app:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
