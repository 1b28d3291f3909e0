"""Main FastAPI application entry point for the YouTube video analyzer.

This is the main application file that starts the FastAPI server.
It imports from src.api.main to keep the structure organized.
"""

from src.api.main import app

if __name__ == "__main__":
    import uvicorn

    from src.analyzer.config import get_config

    config = get_config()
    uvicorn.run("src.main:app", host=config.host, port=config.port)
