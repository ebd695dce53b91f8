"""Run the API server: ``python -m syllabug``."""

import uvicorn

from syllabug.config import settings

if __name__ == "__main__":
    uvicorn.run("syllabug.api.main:app", host=settings.api_host, port=settings.api_port)
