"""FastAPI 서버 실행

Usage:
    python main.py
    # or
    uvicorn booktracker.api:app --reload --host 0.0.0.0 --port 8080
"""
import uvicorn

from booktracker.config import config
from booktracker.logging_config import configure_logging

if __name__ == "__main__":
    import argparse
    import os

    parser = argparse.ArgumentParser(description="Run the Book Tracker API server")
    parser.add_argument("--server.port", dest="server_port", type=int, default=int(os.getenv("PORT", 8080)), help="Port to run the server on")
    parser.add_argument("--server.address", dest="server_address", type=str, default=os.getenv("HOST", "0.0.0.0"), help="Host to run the server on")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args, unknown = parser.parse_known_args()

    configure_logging(config.LOG_LEVEL)

    uvicorn.run(
        "booktracker.api:app",
        host=args.server_address,
        port=args.server_port,
        reload=args.reload,
    )
