"""Application entry point for the SmartDoc OCR API server."""

import uvicorn

from smartdoc.api.app import app, get_pipeline
from smartdoc.utils.config import load_config
from smartdoc.utils.logger import setup_logging


def main() -> None:
    """Verify the OCR model, then start the FastAPI application server."""
    config = load_config()
    setup_logging(config.log_level)
    get_pipeline()
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
