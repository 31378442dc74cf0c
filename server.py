"""
HTTP server for the newsroom site.
Exposes the article JSON API and serves the static frontend.
"""
import logging
import os
from typing import Optional

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from newsroom.article_service import (
    ArticleNotFoundError,
    ArticleService,
    ArticleValidationError,
)
from newsroom.article_store_factory import create_article_store
from newsroom.config import Config

EPHEMERAL_WARNING = (
    "Write to storage failed (ephemeral/read-only). "
    "Changes will not persist. Use external storage for persistence."
)

ROUTABLE_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")

ALLOWED_METHODS = {
    "/api/news": ("GET", "POST"),
    "/api/news/search": ("GET",),
    "/api/news/{article_id}": ("GET", "DELETE"),
}

# Configure the newsroom logger; library modules log beneath it
logger = logging.getLogger('newsroom.server')
package_logger = logging.getLogger('newsroom')
package_logger.setLevel(logging.INFO)

# Add console handler if not already present
if not package_logger.handlers:
    console_handler = logging.StreamHandler()
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)


def sanitize_log_input(value: str) -> str:
    """
    Sanitize user input for logging to prevent log injection attacks.
    Removes newlines and other control characters that could be used for log forging.

    Args:
        value: The user input to sanitize

    Returns:
        Sanitized string safe for logging
    """
    if not isinstance(value, str):
        value = str(value)
    # Replace newlines, carriage returns, and other control characters
    sanitized = value.replace('\n', '_').replace('\r', '_').replace('\t', '_')
    # Truncate to reasonable length to prevent log flooding
    return sanitized[:200]


def _method_not_allowed(allowed):
    """Build an endpoint that rejects a request with 405 and an Allow header."""
    allow_header = ", ".join(allowed)

    async def method_not_allowed(request: Request):
        path = sanitize_log_input(request.url.path)
        logger.warning(f"{request.method} {path} - 405 Method not allowed")
        raise HTTPException(status_code=405, detail="Method Not Allowed", headers={"Allow": allow_header})

    return method_not_allowed


def create_news_app(
    article_service: Optional[ArticleService] = None,
    static_dir: Optional[str] = None,
    seed_sample_data: Optional[bool] = None,
) -> FastAPI:
    """
    Create the newsroom FastAPI application.

    Args:
        article_service: Optional article service (defaults to one built on the
            configured article store)
        static_dir: Directory holding the static frontend (defaults to NEWS_STATIC_DIR)
        seed_sample_data: Write sample articles into an empty store
            (defaults to NEWS_SEED_SAMPLE_DATA)

    Returns:
        FastAPI application instance
    """
    config = Config()
    package_logger.setLevel(getattr(logging, config.log_level, logging.INFO))

    if article_service is None:
        article_service = ArticleService(
            store=create_article_store(state_dir=config.state_dir),
            default_image_url=config.default_image_url,
        )
    if static_dir is None:
        static_dir = config.static_dir
    if seed_sample_data is None:
        seed_sample_data = config.seed_sample_data

    if seed_sample_data:
        article_service.seed_if_absent()

    app = FastAPI(title="Newsroom")  # pylint: disable=redefined-outer-name

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Render HTTP errors as {"error": message}, keeping headers such as Allow."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        """Render failures raised outside a route's own handling as a generic 500."""
        path = sanitize_log_input(request.url.path)
        logger.error(f"{request.method} {path} - 500 Internal server error", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def reject_other_methods(path: str) -> None:
        """Answer every other method on path with a 405 listing the allowed ones."""
        allowed = ALLOWED_METHODS[path]
        app.add_api_route(
            path,
            _method_not_allowed(allowed),
            methods=[m for m in ROUTABLE_METHODS if m not in allowed],
            include_in_schema=False,
        )

    # ================== NEWS API ==================
    @app.get("/api/news")
    async def list_news(category: Optional[str] = None, q: Optional[str] = None):
        """List articles, optionally filtered by category and search text."""
        logger.info(
            "GET /api/news category=%s q=%s",
            sanitize_log_input(category or ""), sanitize_log_input(q or "")
        )
        try:
            articles = article_service.list_articles(category=category, query=q)
        except Exception:  # pylint: disable=broad-except
            logger.exception("GET /api/news - 500 Internal server error")
            raise HTTPException(status_code=500, detail="Internal server error")
        logger.info("GET /api/news - 200 %d articles", len(articles))
        return JSONResponse(content=articles)

    @app.get("/api/news/search")
    async def search_news(q: Optional[str] = None):
        """Search articles by title, content, author or category."""
        logger.info("GET /api/news/search q=%s", sanitize_log_input(q or ""))
        try:
            articles = article_service.list_articles(query=q)
        except Exception:  # pylint: disable=broad-except
            logger.exception("GET /api/news/search - 500 Internal server error")
            raise HTTPException(status_code=500, detail="Internal server error")
        logger.info("GET /api/news/search - 200 %d articles", len(articles))
        return JSONResponse(content=articles)

    @app.post("/api/news")
    async def create_news(request: Request):
        """Create an article."""
        logger.info("POST /api/news")
        try:
            data = await request.json()
        except (ValueError, UnicodeDecodeError):
            logger.warning("POST /api/news - 400 Invalid JSON body")
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        if not isinstance(data, dict):
            logger.warning("POST /api/news - 400 Invalid JSON body")
            raise HTTPException(status_code=400, detail="Invalid JSON body")

        try:
            result = article_service.create_article(data)
        except ArticleValidationError as e:
            logger.warning("POST /api/news - 400 %s", e)
            raise HTTPException(status_code=400, detail=str(e))
        except Exception:  # pylint: disable=broad-except
            logger.exception("POST /api/news - 500 Internal server error")
            raise HTTPException(status_code=500, detail="Internal server error")

        body = dict(result.value)
        if not result.persisted:
            body["warning"] = EPHEMERAL_WARNING
        logger.info("POST /api/news - 201 %s", result.value["id"])
        return JSONResponse(status_code=201, content=body)

    # Registered before the {article_id} routes so "search" is never taken as an id
    reject_other_methods("/api/news")
    reject_other_methods("/api/news/search")

    @app.get("/api/news/{article_id}")
    async def get_news(article_id: str):
        """Get an article by id."""
        sanitized_id = sanitize_log_input(article_id)
        logger.info(f"GET /api/news/{sanitized_id}")
        try:
            article = article_service.get_article(article_id)
        except ArticleNotFoundError:
            logger.warning(f"GET /api/news/{sanitized_id} - 404 Article not found")
            raise HTTPException(status_code=404, detail="Article not found")
        except Exception:  # pylint: disable=broad-except
            logger.exception(f"GET /api/news/{sanitized_id} - 500 Internal server error")
            raise HTTPException(status_code=500, detail="Internal server error")
        logger.info(f"GET /api/news/{sanitized_id} - 200")
        return JSONResponse(content=article)

    @app.delete("/api/news/{article_id}")
    async def delete_news(article_id: str):
        """Delete an article by id."""
        sanitized_id = sanitize_log_input(article_id)
        logger.info(f"DELETE /api/news/{sanitized_id}")
        try:
            result = article_service.delete_article(article_id)
        except ArticleNotFoundError:
            logger.warning(f"DELETE /api/news/{sanitized_id} - 404 Article not found")
            raise HTTPException(status_code=404, detail="Article not found")
        except Exception:  # pylint: disable=broad-except
            logger.exception(f"DELETE /api/news/{sanitized_id} - 500 Internal server error")
            raise HTTPException(status_code=500, detail="Internal server error")

        if result.persisted:
            body = {"message": "Article deleted"}
        else:
            body = {"message": "Article deleted (in-memory)", "warning": EPHEMERAL_WARNING}
        logger.info(f"DELETE /api/news/{sanitized_id} - 200")
        return JSONResponse(content=body)

    reject_other_methods("/api/news/{article_id}")

    # ================== STATIC FRONTEND ==================
    index_path = os.path.join(static_dir, "index.html")
    if os.path.isdir(static_dir):
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

        @app.get("/")
        async def frontend_home():
            """Serve the frontend entry page."""
            logger.info("GET /")
            if not os.path.isfile(index_path):
                raise HTTPException(status_code=404, detail="Not Found")
            return FileResponse(index_path)
    else:
        logger.info("Static directory %s not found; serving the API only", os.path.abspath(static_dir))

    return app


if __name__ == "__main__":
    import sys
    import uvicorn

    config = Config()

    # Allow command-line argument to override environment variable
    port = config.server_port
    host = config.server_host

    if len(sys.argv) > 1:
        try:
            port = int(sys.argv[1])
        except ValueError:
            print(f"Invalid port number: {sys.argv[1]}")
            sys.exit(1)

    app = create_news_app()

    print(f"Starting newsroom on http://{host}:{port}")
    print(f"API available at http://{host}:{port}/api/news")
    if config.article_storage_type == "local":
        print(f"Article file: {os.path.abspath(os.path.join(config.state_dir, 'articles.json'))}")
    print("Press Ctrl+C to stop")

    uvicorn.run(app, host=host, port=port, log_level="info")
