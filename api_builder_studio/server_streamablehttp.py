import logging
import sys

from api_builder_studio.studio.config import StudioSettings
from api_builder_studio.studio.http_server import create_app

logging.basicConfig(stream=sys.stderr, level=logging.INFO, format='[%(levelname)s] %(message)s')


def main() -> None:
    """Start the API Builder Studio HTTP server"""
    settings = StudioSettings.from_env()
    app = create_app(settings=settings)

    logging.info("Available endpoints:")
    logging.info(f"  - POST http://{settings.host}:{settings.port}/ (MCP protocol)")
    logging.info(f"  - GET http://{settings.host}:{settings.port}/api/state (Studio state)")
    logging.info(f"  - POST http://{settings.host}:{settings.port}/api/send (Send simulated request)")
    logging.info(f"  - GET http://{settings.host}:{settings.port}/health (Health check)")

    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
