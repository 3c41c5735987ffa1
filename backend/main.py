"""
Default application built from the environment.

Run with ``uvicorn main:app`` or ``python main.py``. Importing this module
reads the environment and fails in production without JWT_SECRET_KEY; tests
build their own app through api.create_app().
"""

import logging

from api import create_app
from config import load_settings

settings = load_settings()

# Configure logging
logging.basicConfig(level=settings.log_level)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
