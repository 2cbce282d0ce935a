import re

from base32_codec import ALPHABET
from scripts.log_2fa_cron import main as log_2fa
from totp_utils import generate_totp_code, new_secret, verify_totp_code


def test_new_secret():
    secret = new_secret()

    assert len(secret) == 32
    assert set(secret) <= set(ALPHABET)
    assert len(new_secret(16)) == 16


def test_generate_for_time():
    assert generate_totp_code("SECRET", for_time=0) == "377331"
    assert generate_totp_code("SECRET", for_time=29) == "377331"
    assert generate_totp_code("SECRET", for_time=30) == "924065"


def test_generate_now_is_verifiable():
    secret = new_secret()
    code = generate_totp_code(secret)

    assert len(code) == 6
    assert verify_totp_code(secret, code, valid_window=1)


def test_verify_with_window():
    assert verify_totp_code("SECRET", "377331", for_time=30)
    assert verify_totp_code("SECRET", "377331", valid_window=2, for_time=60)
    assert not verify_totp_code("SECRET", "377331", valid_window=0, for_time=30)


def test_sha1_and_eight_digits():
    code = generate_totp_code("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", algorithm="SHA1", digits=8, for_time=59)

    assert code == "94287082"
    assert verify_totp_code("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ", code, algorithm="SHA1", digits=8, for_time=59)


def test_cron_prints_code(tmp_path, capsys):
    secret_file = tmp_path / "secret.txt"
    secret_file.write_text("SECRET\n")

    log_2fa(str(secret_file))

    out = capsys.readouterr().out
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} - 2FA Code: \d{6}\n", out)


def test_cron_without_secret_file(tmp_path, capsys):
    log_2fa(str(tmp_path / "missing.txt"))

    assert "Secret file not found" in capsys.readouterr().out


def test_cron_with_unreadable_secret_file(tmp_path, capsys):
    secret_file = tmp_path / "secret.txt"
    secret_file.write_bytes(b"\xff\xfe\x00")

    log_2fa(str(secret_file))

    out = capsys.readouterr().out
    assert out.startswith("Error reading secret:")
    assert "2FA Code" not in out
