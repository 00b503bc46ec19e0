# Entry point for `uvicorn main:app` (Render start command)
from trackas.main import app

__all__ = ["app"]
