"""
asgi.py -- Application assembly for Doorman.

This is the ONLY file that imports from both api/ and web/. It joins the two
independent layers into a single ASGI app without coupling them to each other.

Run with:  uvicorn asgi:app --reload
           python main.py
"""

from fastapi.staticfiles import StaticFiles

from api.main import app
from web.routes import STATIC_DIR
from web.routes import router as web_router

# Mount the web UI router here, not in api/main.py.
app.include_router(web_router, tags=["Web UI"])
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
