from __future__ import annotations

import uvicorn

from .config import settings
from .utils import configure_logging


def main() -> None:
    configure_logging(settings.log_level)
    uvicorn.run("architrack.main:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    main()
