"""
run.py

Starts the analyzer with Uvicorn:
    python run.py

HOST / PORT come from the environment (see cmr_service/config.py).
No business logic should be written here.
"""

import uvicorn

from cmr_service import config


if __name__ == "__main__":
    uvicorn.run(
        "cmr_service.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=True
    )
