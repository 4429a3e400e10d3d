#!/usr/bin/env python3
"""Booking User Fields - field settings, rendering and capture service"""

import uvicorn
from fastapi import FastAPI

from booking_fields.config import config
from booking_fields.hooks import FieldHooks
from booking_fields.logging_config import get_logger, setup_logging
from booking_fields.routers.admin import router as admin_router
from booking_fields.routers.bookings import router as bookings_router
from booking_fields.routers.calendars import router as calendars_router
from booking_fields.routers.editor import router as editor_router
from booking_fields.routers.health import health
from booking_fields.routers.settings import router as settings_router

# Configure logging (INFO -> stdout, WARNING/ERROR -> stderr)
setup_logging(config)
logger = get_logger(__name__)


app = FastAPI(
    title="Booking User Fields",
    description="Administrator-defined user fields for booking calendars: "
    "global and per-calendar field lists, form rendering and submission capture",
    version="1.0.0",
    license_info={
        "name": "MIT",
    },
)

# Extension points shared by every request; host code registers callbacks here
app.state.field_hooks = FieldHooks()

app.include_router(health)
app.include_router(settings_router)
app.include_router(calendars_router)
app.include_router(bookings_router)
app.include_router(editor_router)
app.include_router(admin_router)


if __name__ == "__main__":
    port = config.get("port")
    logger.info(f"Starting Booking User Fields on 0.0.0.0:{port}")
    logger.info("Health check available at /health")

    try:
        uvicorn.run(app, host="0.0.0.0", port=port, log_level=config["log_level"].lower())
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise
