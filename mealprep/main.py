import logging

import uvicorn

from mealprep.utilities import config


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    from mealprep.api.api_run import app

    print(f"Uvicorn running on http://localhost:{config.APP_PORT} (Press CTRL+C to quit)")
    uvicorn.run(app, host=config.APP_HOST, port=config.APP_PORT)
