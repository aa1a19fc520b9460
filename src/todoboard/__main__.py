"""Run the Todoboard service: python -m todoboard"""

import logging

import uvicorn

from todoboard.config import load_config

config = load_config()
logging.basicConfig(
    level=config.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
uvicorn.run("todoboard.app:create_app", host=config.host, port=config.port, factory=True)
