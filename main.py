import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
import uvicorn
from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from schemas import ShortenRequest, ShortenResponse, ErrorResponse
from db import Database
from shortcode import generate_short_code
from store import MappingStore, StorageError
from validators import is_valid_url, parse_short_code

BASE_DIR = Path(__file__).resolve().parent
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("url_shortener")


def error_response(message: str, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def read_payload(request: Request):
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        try:
            form = await request.form()
        except (HTTPException, MultiPartException):
            return {}
        return dict(form)
    try:
        return await request.json()
    except ValueError:
        return {}


def get_store(request: Request) -> MappingStore:
    return request.app.state.store


def create_app(database: Optional[Database] = None) -> FastAPI:
    database = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await database.create_all()
            logger.info("Database connected.")
        except (SQLAlchemyError, OSError) as exc:
            # keep serving; every store call will fail until the database is back
            logger.error(f"Database connection error: {exc}")
        yield
        await database.dispose()

    app = FastAPI(
        title="URL Shortener Microservice",
        description="Shortens URLs to numeric codes and redirects them.",
        lifespan=lifespan,
    )
    app.state.store = MappingStore(database)

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.mount("/public", StaticFiles(directory=BASE_DIR / "public"), name="public")

    @app.get("/", include_in_schema=False)
    async def index():
        return FileResponse(BASE_DIR / "views" / "index.html")

    @app.post(
        "/api/shorturl",
        response_model=ShortenResponse,
        responses={500: {"model": ErrorResponse}},
    )
    async def shorten_url(request: Request, store: MappingStore = Depends(get_store)):
        try:
            try:
                req = ShortenRequest.model_validate(await read_payload(request))
            except ValidationError:
                req = ShortenRequest()
            logger.info(f"Shorten API called with url={req.url}")
            if not req.url or not is_valid_url(req.url):
                logger.info("Shorten API rejected invalid url")
                return error_response("invalid url")

            code = generate_short_code()
            try:
                await store.create(req.url, code)
            except StorageError:
                logger.exception(f"Could not persist short_url={code} for url={req.url}")
                return error_response("Error creating short URL", status_code=500)
            logger.info(f"Shorten API response: short_url={code}, url={req.url}")
            return ShortenResponse(original_url=req.url, short_url=code)
        except Exception:
            logger.exception("Error handling short URL request")
            return error_response("Internal Server Error", status_code=500)

    @app.get(
        "/api/shorturl/{short_url}",
        response_class=RedirectResponse,
        status_code=302,
        responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def redirect(short_url: str, store: MappingStore = Depends(get_store)):
        logger.info(f"Redirect API called with short_url={short_url}")
        try:
            code = parse_short_code(short_url)
            entry = await store.find_by_code(code) if code is not None else None
            if entry is None:
                logger.warning(f"Redirect failed: short_url={short_url} not found")
                return error_response("URL not found", status_code=404)
            logger.info(f"Redirecting to url={entry.original_url} for short_url={short_url}")
            return RedirectResponse(entry.original_url, status_code=302)
        except Exception:
            logger.exception("Error handling short URL request")
            return error_response("Internal Server Error", status_code=500)

    return app


app = create_app()


if __name__ == "__main__":
    logger.info(f"Listening on port {PORT}")
    uvicorn.run(app, host=HOST, port=PORT)
