"""Flask Extension Instances and Initialisation."""

import logging

from flask import Flask
from flask_compress import Compress

logger = logging.getLogger(__name__)

# Flask-Compress instance, compresses JSON responses with gzip/brotli
compress = Compress()


def init_extensions(app: Flask) -> None:
    """Initialise Flask extension objects."""
    app.config.setdefault("COMPRESS_MIMETYPES", ["application/json"])
    app.config.setdefault("COMPRESS_MIN_SIZE", 256)  # Don't compress tiny responses
    compress.init_app(app)
    logger.debug("Response compression enabled for %s", app.config["COMPRESS_MIMETYPES"])
