"""
asgi.py -- ASGI entry point for AgriRent.

Run with:  uvicorn asgi:app --reload
           python asgi.py        (binds PORT from the environment, default 5000)
"""

import uvicorn

from api.main import app
from core.config import get_settings

__all__ = ["app"]


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)  # nosec B104
