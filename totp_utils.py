import re
import time
from typing import Optional

import pyotp
import pyotp.utils

from errors import ValidationError


TOTP_PERIOD = 30
TOTP_DIGITS = 6

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

_HEX_SEED_RE = re.compile(r"^[0-9a-f]{64}$")
_WHITESPACE_RE = re.compile(r"\s+")


# ---------- Seed normalization ----------

def normalize_hex_seed(raw: str) -> str:
    """
    Strip all whitespace, lowercase, and check the result is 64 hex chars.

    Raises:
        ValidationError: wrong length or characters outside 0-9a-f
    """
    if raw is None:
        raise ValidationError("Seed is missing")

    seed = _WHITESPACE_RE.sub("", raw).lower()

    if len(seed) != 64:
        raise ValidationError(
            f"Seed must be exactly 64 hex characters, got {len(seed)}"
        )
    if not _HEX_SEED_RE.match(seed):
        raise ValidationError("Seed contains characters outside 0-9a-f")

    return seed


def hex_to_bytes(hex_seed: str) -> bytes:
    """Convert an already validated hex string to raw bytes."""
    return bytes(
        int(hex_seed[i:i + 2], 16) for i in range(0, len(hex_seed), 2)
    )


def to_base32(data: bytes) -> str:
    """
    RFC 4648 base32 without padding, for showing a secret to a human
    or an authenticator app.

    Bit-packed: 5-bit groups are read off a rolling buffer, so the output
    equals base64.b32encode(data).decode().rstrip("=") without building
    and stripping the padded form.
    """
    out = []
    buffer = 0
    bits = 0
    for byte in data:
        buffer = (buffer << 8) | byte
        bits += 8
        while bits >= 5:
            bits -= 5
            out.append(BASE32_ALPHABET[(buffer >> bits) & 0x1F])
        buffer &= (1 << bits) - 1

    if bits:
        out.append(BASE32_ALPHABET[(buffer << (5 - bits)) & 0x1F])

    return "".join(out)


def _hex_seed_to_base32(hex_seed: str) -> str:
    """
    Helper: convert 64-char hex seed to unpadded base32 string
    (pyotp pads it back itself)
    """
    return to_base32(hex_to_bytes(normalize_hex_seed(hex_seed)))


def provisioning_uri(
    hex_seed: str,
    account_name: str,
    issuer_name: Optional[str] = None,
    period_seconds: int = TOTP_PERIOD,
    digits: int = TOTP_DIGITS,
) -> str:
    """
    Build the otpauth:// URI an authenticator app scans to enrol the seed.
    """
    totp = pyotp.TOTP(
        _hex_seed_to_base32(hex_seed),
        digits=digits,
        interval=period_seconds,
    )
    return totp.provisioning_uri(name=account_name, issuer_name=issuer_name)


# ---------- OTP engine ----------

def time_step(now: float, period_seconds: int = TOTP_PERIOD) -> int:
    return int(now // period_seconds)


def seconds_remaining(period_seconds: int = TOTP_PERIOD, now: Optional[float] = None) -> int:
    """
    Seconds until the current code rotates, in 1..period_seconds.
    Exactly on a boundary the full period is reported, never 0.
    """
    if now is None:
        now = time.time()
    return period_seconds - (int(now) % period_seconds)


def generate(secret: bytes, period_seconds: int, digits: int, counter: int) -> str:
    """
    HOTP value of `secret` at `counter` (RFC 4226), zero-padded to `digits`.

    `period_seconds` only has to be valid here; the caller already turned
    wall-clock time into `counter`.
    """
    if not secret:
        raise ValueError("secret must not be empty")
    if period_seconds <= 0:
        raise ValueError("period_seconds must be positive")
    if not 5 <= digits <= 9:
        raise ValueError("digits must be between 5 and 9")
    if counter < 0:
        raise ValueError("counter must not be negative")

    # SHA-1, dynamic truncation and zero padding are pyotp's defaults
    hotp = pyotp.HOTP(to_base32(secret), digits=digits)
    return hotp.at(counter)


def generate_current(
    secret: bytes,
    period_seconds: int = TOTP_PERIOD,
    digits: int = TOTP_DIGITS,
    now: Optional[float] = None,
) -> str:
    if now is None:
        now = time.time()
    return generate(secret, period_seconds, digits, time_step(now, period_seconds))


def verify(
    secret: bytes,
    candidate_code: str,
    period_seconds: int = TOTP_PERIOD,
    digits: int = TOTP_DIGITS,
    window: int = 1,
    now: Optional[float] = None,
) -> bool:
    """
    Check `candidate_code` against every step in [t - window, t + window].

    Negative offsets accept codes issued slightly earlier, positive ones
    tolerate a verifier clock that runs behind.
    """
    if window < 0:
        raise ValueError("window must not be negative")
    if now is None:
        now = time.time()

    t = time_step(now, period_seconds)
    for i in range(-window, window + 1):
        counter = t + i
        # pyotp refuses negative counters
        if counter < 0:
            continue
        expected = generate(secret, period_seconds, digits, counter)
        if pyotp.utils.strings_equal(candidate_code, expected):
            return True
    return False


# ---------- Hex seed API ----------

def generate_totp_code(
    hex_seed: str,
    period_seconds: int = TOTP_PERIOD,
    digits: int = TOTP_DIGITS,
    now: Optional[float] = None,
) -> str:
    """
    Generate current TOTP code from hex seed

    Args:
        hex_seed: 64-character hex string
        now: unix time to evaluate at (defaults to the wall clock)

    Returns:
        6-digit TOTP code as string
    """
    secret = hex_to_bytes(normalize_hex_seed(hex_seed))
    return generate_current(secret, period_seconds, digits, now=now)


def verify_totp_code(
    hex_seed: str,
    code: str,
    valid_window: int = 1,
    period_seconds: int = TOTP_PERIOD,
    digits: int = TOTP_DIGITS,
    now: Optional[float] = None,
) -> bool:
    """
    Verify TOTP code with time window tolerance

    Args:
        hex_seed: 64-character hex string
        code: 6-digit code to verify
        valid_window: number of periods before/after to accept (default 1 = ±30s)

    Returns:
        True if code is valid, False otherwise
    """
    secret = hex_to_bytes(normalize_hex_seed(hex_seed))
    return verify(secret, code, period_seconds, digits, window=valid_window, now=now)
