#!/usr/bin/env python
import logging
import os

import uvicorn

from recipe_discovery.app.core.config import get_settings

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())

if __name__ == "__main__":
    uvicorn.run(
        "recipe_discovery.app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=settings.log_level.lower(),
    )
