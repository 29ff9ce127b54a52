"""Entrypoint for `fastapi run backend/main.py` / `uvicorn main:app`."""

from focusroom import app  # noqa: F401
