from __future__ import annotations

import os

import uvicorn

from mindmate.app.main import app


def run() -> None:
    """Run the MindMate FastAPI application with environment-aware host and port."""

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
