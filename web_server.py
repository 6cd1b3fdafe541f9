"""Web server entry point for Chirpy"""

import os

import uvicorn

# Load environment variables from .env file BEFORE importing anything else
from dotenv import load_dotenv
load_dotenv()

from chirpy.app import ChirpyApp
from chirpy.web.main import create_app


def main() -> None:
    context = ChirpyApp().initialize()
    settings = context.settings

    host = os.getenv("WEB_HOST", settings.web.host)
    port = int(os.getenv("WEB_PORT", str(settings.web.port)))

    print(f"Starting Chirpy ({settings.app.environment})...")
    print(f"Database: {context.store.path}")
    print(f"Local server will be available at: http://localhost:{port}")

    # Single process: the document lock only serializes threads within it
    uvicorn.run(create_app(context), host=host, port=port, workers=1, log_level="info")


if __name__ == "__main__":
    main()
