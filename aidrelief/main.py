import logging

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aidrelief import APP_NAME, VERSION, request_store
from aidrelief.dashboard_router import router as dashboard_router
from aidrelief.errors import ReliefError
from aidrelief.firebase_admin_client import get_db
from aidrelief.logging_config import configure_logging
from aidrelief.requests_router import router as requests_router
from aidrelief.settings import settings
from aidrelief.warehouses_router import router as warehouses_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("app")

app = FastAPI(title="AidRelief API", version=VERSION)

frontend_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=frontend_origins or ["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
    max_age=86400,
)

def add_cors_headers(request: Request, response: Response):
    origin = request.headers.get("origin")
    response.headers["Access-Control-Allow-Origin"] = origin if origin else "*"
    response.headers["Vary"] = "Origin"
    response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = request.headers.get("access-control-request-headers", "*")
    response.headers["Access-Control-Expose-Headers"] = "*"
    return response

@app.exception_handler(RequestValidationError)
async def validation_exc(request: Request, exc: RequestValidationError):
    res = JSONResponse(status_code=422, content={"detail": jsonable_encoder(exc.errors()), "code": "validation_error"})
    return add_cors_headers(request, res)

@app.exception_handler(ReliefError)
async def relief_exc(request: Request, exc: ReliefError):
    res = JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})
    return add_cors_headers(request, res)

@app.exception_handler(HTTPException)
async def http_exc(request: Request, exc: HTTPException):
    res = JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
    return add_cors_headers(request, res)

@app.exception_handler(Exception)
async def any_exc(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    res = JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
    return add_cors_headers(request, res)

@app.options("/{full_path:path}")
def preflight(full_path: str, request: Request):
    return add_cors_headers(request, Response(status_code=200))


@app.get("/health")
def health(db=Depends(get_db)):
    request_store.ping(db)
    return {
        "ok": True,
        "app": APP_NAME,
        "version": VERSION,
        "requests_collection": settings.REQUESTS_COLLECTION,
        "warehouses_collection": settings.WAREHOUSES_COLLECTION,
    }


app.include_router(requests_router, prefix="/api/requests", tags=["requests"])
app.include_router(warehouses_router, prefix="/api/warehouses", tags=["warehouses"])
app.include_router(dashboard_router, prefix="/api", tags=["dashboard"])
