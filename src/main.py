"""ASGI entry point: ``uvicorn src.main:app``.

Running the module directly starts uvicorn with the host, port and reload
options from settings.
"""

import uvicorn

from src.core.application import create_application
from src.core.config.settings import settings
from src.core.initialization import initialize_application

initialize_application()
app = create_application()


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.RELOAD,
        workers=None if settings.RELOAD else settings.API_WORKERS,
    )
