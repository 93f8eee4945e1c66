import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from otpshare.api.routes.secrets import router as secrets_router
from otpshare.api.routes.totp import router as totp_router
from otpshare.core.config import settings
from otpshare.core.errors import OtpShareError
from otpshare.core.logging_config import setup_logging
from otpshare.crud.shares import purge_expired_shares
from otpshare.db.init_db import init_db
from otpshare.db.session import dispose_engine, get_engine
from otpshare.otp.clock import utcnow

logger = logging.getLogger(__name__)

app = FastAPI(title="OTP Share", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

app.include_router(totp_router)
app.include_router(secrets_router)


@app.exception_handler(OtpShareError)
async def _otpshare_error(request: Request, exc: OtpShareError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


@app.on_event("startup")
def _startup() -> None:
    setup_logging()
    init_db()
    with Session(get_engine()) as db:
        purged = purge_expired_shares(db, utcnow())
    if purged:
        logger.info("Purged %d expired share grants", purged)


@app.on_event("shutdown")
def _shutdown() -> None:
    dispose_engine()


@app.get("/health")
def health():
    return {"status": "ok"}
