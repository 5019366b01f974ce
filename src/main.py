"""Entrypoint: `uvicorn src.main:app --port 3001`"""

from src.api.app import create_app

app = create_app()
