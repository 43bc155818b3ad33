import importlib.util
from pathlib import Path

import pytest

from totp_utils import generate_totp_code

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "log_2fa_cron.py"


@pytest.fixture(scope="module")
def cron():
    spec = importlib.util.spec_from_file_location("log_2fa_cron", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_format_log_line_is_utc(cron):
    assert cron.format_log_line("012345", 0) == "1970-01-01 00:00:00 - 2FA Code: 012345"
    assert cron.format_log_line("987654", 1_000_000_000) == "2001-09-09 01:46:40 - 2FA Code: 987654"


def test_prints_current_code(cron, tmp_path, hex_seed, capsys):
    seed_path = tmp_path / "seed.txt"
    seed_path.write_text(hex_seed + "\n")

    line = cron.main(seed_path=str(seed_path), now=1_000_000_000)

    expected_code = generate_totp_code(hex_seed, now=1_000_000_000)
    assert line == f"2001-09-09 01:46:40 - 2FA Code: {expected_code}"
    assert capsys.readouterr().out.strip() == line


def test_missing_seed_logs_and_skips(cron, tmp_path, capsys, caplog):
    line = cron.main(seed_path=str(tmp_path / "seed.txt"), now=0)
    assert line is None
    assert capsys.readouterr().out == ""
    assert "Seed not decrypted yet" in caplog.text
