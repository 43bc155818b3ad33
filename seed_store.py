import logging
from pathlib import Path
from typing import Union

from errors import SeedNotFoundError, SeedWriteError, ValidationError
from totp_utils import normalize_hex_seed

logger = logging.getLogger(__name__)


class SeedStore:
    """
    The one persisted hex seed. Written once by provisioning, re-read on
    every request; no locking, so a reader racing a write may see old data.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, hex_seed: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(hex_seed, encoding="utf-8")
        except OSError as e:
            raise SeedWriteError(details=f"Could not write seed to {self.path}: {e}") from e
        logger.info("Seed written to %s", self.path)

    def load(self) -> str:
        if not self.path.exists():
            raise SeedNotFoundError(details=f"Seed file not found at {self.path}")

        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SeedNotFoundError(details=f"Could not read seed file at {self.path}: {e}") from e

        if not raw.strip():
            raise SeedNotFoundError(details=f"Seed file at {self.path} is empty")

        try:
            return normalize_hex_seed(raw)
        except ValidationError as e:
            raise SeedNotFoundError(details=f"Seed file at {self.path} is corrupt: {e.message}") from e
