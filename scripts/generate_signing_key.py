#!/usr/bin/env python3
"""
Génère un secret de signature HMAC pour SESSION_ROTATION_SIGNING_KEY.
"""

import base64
import sys

from session_rotation.core import CryptoProvider

DEFAULT_BYTES = 32


def main(argv: list) -> int:
    length = int(argv[1]) if len(argv) > 1 else DEFAULT_BYTES
    if length < 16:
        print("Signing key must be at least 16 bytes", file=sys.stderr)
        return 1

    key = base64.urlsafe_b64encode(CryptoProvider().random_bytes(length)).decode("ascii")
    print(f"SESSION_ROTATION_SIGNING_KEY={key}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
