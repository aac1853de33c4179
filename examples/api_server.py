"""
Run the REST API for the Reuters news corpus.

Configuration comes from LEWIS_* environment variables, for example
LEWIS_COLLECTION_PATH=reut2-003.xml and LEWIS_LOG_LEVEL=DEBUG.

    GET http://localhost:8080/?id=TOPICS&content=wheat
"""

import argparse
from pathlib import Path

import uvicorn

from lewis_search.api.http import create_app
from lewis_search.models.settings import ServiceSettings


def main():
    """Run the API server."""
    parser = argparse.ArgumentParser(description="Reuters news corpus search API")
    parser.add_argument("--collection", type=Path, help="XML collection to search")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args()

    settings = ServiceSettings.from_env()
    if args.collection:
        settings = settings.copy(update={"collection_path": args.collection})

    print("Starting Reuters News Corpus Search API...")
    print(f"Collection: {settings.collection_path}")
    print(f"Search endpoint: GET http://localhost:{args.port}/?id=&content=")

    uvicorn.run(
        create_app(settings=settings),
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
