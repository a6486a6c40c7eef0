import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from config import Settings, settings as default_settings
from database import Database
from errors import AppError, NotFoundError, StoreError
from logging_config import setup_logging
from schemas import ContactRequest, LoginRequest, RegisterRequest, VideoRequest
from services import ContactService, UserService, VideoService

logger = logging.getLogger(__name__)

# Same set of headers helmet() sends by default
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}


# -----------------
# Dependencies
# -----------------
def get_store(request: Request) -> Database:
    return request.app.state.store


def get_user_service(store: Database = Depends(get_store)) -> UserService:
    return UserService(store)


def get_video_service(store: Database = Depends(get_store)) -> VideoService:
    return VideoService(store)


def get_contact_service(store: Database = Depends(get_store)) -> ContactService:
    return ContactService(store)


def create_app(settings: Optional[Settings] = None, store: Optional[Database] = None) -> FastAPI:
    """Build the application.

    When ``store`` is given it is used as is; otherwise a connection is
    opened from ``settings`` at startup.  A missing or unreachable
    database aborts startup.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = store is None
        current = None
        try:
            current = store or Database.connect(settings.database_url, settings.database_name)
            current.ensure_indexes()
        except Exception:
            logger.critical("Could not start without a database", exc_info=True)
            if owned and current is not None:
                current.close()
            raise
        app.state.store = current
        try:
            yield
        finally:
            if owned:
                app.state.store.close()

    app = FastAPI(title=settings.project_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    # -----------------
    # Basic routes
    # -----------------
    @app.get("/", response_class=PlainTextResponse)
    def read_root():
        logger.info("A new request has been raised on %s", datetime.now(timezone.utc).isoformat())
        return "Hey"

    # -----------------
    # Users
    # -----------------
    @app.post("/users", status_code=201)
    def register(payload: RegisterRequest, users: UserService = Depends(get_user_service)):
        try:
            users.register(payload)
        except StoreError as e:
            return JSONResponse(status_code=e.status_code, content={"error": e.message})
        except AppError as e:
            return JSONResponse(status_code=e.status_code, content={"message": e.message})
        return {"message": "User registered successfully"}

    @app.post("/authenticate")
    def authenticate(payload: LoginRequest, users: UserService = Depends(get_user_service)):
        try:
            users.authenticate(payload.nickname)
        except AppError as e:
            return JSONResponse(status_code=e.status_code, content={"success": False, "message": e.message})
        return {"success": True}

    # -----------------
    # Videos
    # -----------------
    @app.post("/videos", status_code=201)
    def submit_video(payload: VideoRequest, videos: VideoService = Depends(get_video_service)):
        try:
            videos.submit(payload.url)
        except AppError as e:
            return JSONResponse(status_code=e.status_code, content={"error": e.message})
        return {"message": "Video posted successfully"}

    @app.get("/videos")
    def fetch_video(videos: VideoService = Depends(get_video_service)):
        try:
            video = videos.fetch()
        except (NotFoundError, StoreError) as e:
            return JSONResponse(status_code=e.status_code, content={"error": e.message})
        return {"url": video.url}

    # -----------------
    # Contact
    # -----------------
    @app.post("/contact", status_code=201)
    def contact(payload: ContactRequest, contacts: ContactService = Depends(get_contact_service)):
        try:
            contacts.submit(payload)
        except AppError as e:
            return JSONResponse(status_code=e.status_code, content={"message": e.message})
        return {"message": "Contact saved successfully"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=default_settings.host, port=default_settings.port, lifespan="on")
