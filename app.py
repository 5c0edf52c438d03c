from __future__ import annotations

import argparse
import contextlib
import logging
import time

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from persistence import AsyncDocumentVoterRepository, DocumentStore, InMemoryDocumentStore, RedisJsonDocumentStore
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_document_store(settings: Settings) -> DocumentStore:
    if settings.store_backend == "memory":
        logger.info("Using in-memory document store")
        return InMemoryDocumentStore()
    logger.info("Using redis document store at %s", settings.redis_url)
    return RedisJsonDocumentStore.from_url(
        settings.redis_url,
        socket_timeout=settings.redis_socket_timeout,
        socket_connect_timeout=settings.redis_connect_timeout,
    )


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    store: DocumentStore = app.state.document_store
    app.state.started_at = time.monotonic()

    # Advisory only: the store may come up after us.
    if not await store.ping():
        logger.warning("Document store not reachable at startup; continuing, requests will fail until it is")

    try:
        yield
    finally:
        await store.close()
        logger.info("Document store connection closed")


def create_app(store: DocumentStore | None = None, settings: Settings | None = None) -> FastAPI:
    load_dotenv("local.env")

    from endpoints.voter_endpoints import router as voter_router

    settings = settings or get_settings()
    store = store if store is not None else build_document_store(settings)

    app = FastAPI(title="Voter API", lifespan=lifespan)
    app.state.settings = settings
    app.state.document_store = store
    app.state.voter_repository = AsyncDocumentVoterRepository(store, trace_calls=settings.debug_log_requests)
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def bad_request_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    app.include_router(voter_router)

    return app


def main(argv: list[str] | None = None) -> None:
    import uvicorn

    settings = get_settings()

    parser = argparse.ArgumentParser(description="Voter record API")
    parser.add_argument("--host", default=settings.host, help="Listen address (default: %(default)s)")
    parser.add_argument("-p", "--port", type=int, default=settings.port, help="Listen port (default: %(default)s)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Starting server on %s:%d", args.host, args.port)
    # The module-level app owns the process's only store client.
    uvicorn.run(app, host=args.host, port=args.port)


app = create_app()


if __name__ == "__main__":
    main()
