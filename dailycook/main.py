import logging

import uvicorn
from dailycook.api.api_run import app
from dailycook.utilities.config import APP_HOST, APP_PORT, DEBUG, LOG_LEVEL


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("DailyCook API on http://localhost:%d (debug=%s)", APP_PORT, DEBUG)
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
