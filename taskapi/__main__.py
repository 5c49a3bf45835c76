"""Run the API with uvicorn: ``python -m taskapi``."""
from __future__ import annotations

import uvicorn

from taskapi.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("taskapi.app:create_app", factory=True, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
