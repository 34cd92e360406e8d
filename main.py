"""EasyHealth API - healthcare facility management service."""

import uvicorn

from easyhealth.config import settings
from easyhealth.main import app  # noqa: F401


if __name__ == "__main__":
    uvicorn.run(
        "easyhealth.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
