#!/usr/bin/env python3

import os
import datetime
import pytz
from totp_utils import generate_totp_code

SECRET_PATH = os.getenv("TOTP_SECRET_PATH", "/data/secret.txt")


def main(secret_path: str = SECRET_PATH):
    # 1. Read base32 secret
    if not os.path.exists(secret_path):
        print("Secret file not found. Cannot generate 2FA code.")
        return

    try:
        with open(secret_path, "r", encoding="utf-8") as f:
            secret = f.read().strip()
    except (OSError, UnicodeDecodeError) as e:
        print("Error reading secret:", e)
        return

    # 2. Generate TOTP
    code = generate_totp_code(secret)

    # 3. UTC timestamp
    timestamp = datetime.datetime.now(pytz.utc).strftime("%Y-%m-%d %H:%M:%S")

    # 4. Output
    print(f"{timestamp} - 2FA Code: {code}")


if __name__ == "__main__":
    main()
