import logging
from pathlib import Path
from typing import Union

import requests

from config import settings
from errors import SeedRequestError

logger = logging.getLogger(__name__)


def request_seed(
    student_id: str,
    github_repo_url: str,
    api_url: str,
    public_key_path: Union[str, Path] = "student_public.pem",
    output_path: Union[str, Path] = "encrypted_seed.txt",
    timeout: int = 30,
) -> str:
    """
    Ask the issuing API for a seed encrypted to our public key and save the
    base64 ciphertext to `output_path`.
    """
    # PEM goes out as-is, real newlines included
    public_key_pem = Path(public_key_path).read_text()

    payload = {
        "student_id": student_id,
        "github_repo_url": github_repo_url,
        "public_key": public_key_pem,
    }

    try:
        response = requests.post(api_url, json=payload, timeout=timeout)
    except requests.RequestException as e:
        raise SeedRequestError(details=f"Could not reach {api_url}: {e}") from e

    logger.debug("Seed API answered %s: %s", response.status_code, response.text)

    try:
        data = response.json()
    except ValueError as e:
        raise SeedRequestError("Seed API did not return JSON", details=response.text) from e

    if not isinstance(data, dict) or "encrypted_seed" not in data:
        raise SeedRequestError("Seed API returned no encrypted_seed", details=data)

    encrypted_seed = data["encrypted_seed"]

    output_path = Path(output_path)
    output_path.write_text(encrypted_seed)
    logger.info("Encrypted seed saved to %s", output_path)

    return encrypted_seed


def main():
    logging.basicConfig(level=settings.LOG_LEVEL)

    if not (settings.SEED_API_URL and settings.STUDENT_ID and settings.GITHUB_REPO_URL):
        raise SystemExit("SEED_API_URL, STUDENT_ID and GITHUB_REPO_URL must be set")

    request_seed(
        settings.STUDENT_ID,
        settings.GITHUB_REPO_URL,
        settings.SEED_API_URL,
        public_key_path=settings.PUBLIC_KEY_PATH,
        output_path=settings.ENCRYPTED_SEED_PATH,
        timeout=settings.REQUEST_TIMEOUT,
    )


if __name__ == "__main__":
    main()
