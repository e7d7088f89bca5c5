#!/usr/bin/env python3
"""Run script for breakwatch."""

import logging

import uvicorn

from breakwatch import config

if __name__ == "__main__":
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "breakwatch.api.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
