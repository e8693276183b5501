# tc_core/invitations/codes.py
from __future__ import annotations

import secrets
import string

# No 0/O or 1/I: codes are read aloud and typed by hand.
CODE_ALPHABET = "".join(c for c in string.ascii_uppercase + string.digits if c not in "0O1I")
CODE_GROUP_LENGTH = 4
CODE_GROUPS = 2


def normalize_code(raw) -> str:
    return str(raw or "").strip().upper()


def generate_code() -> str:
    """Random code in the XXXX-XXXX format."""
    return "-".join(
        "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_GROUP_LENGTH))
        for _ in range(CODE_GROUPS)
    )


def generate_unique_code(exists, *, attempts: int = 10) -> str:
    """
    Generate a code not yet taken according to `exists(code) -> bool`.
    The unique index on InvitationCode.code is the final guard.
    """
    for _ in range(attempts):
        code = generate_code()
        if not exists(code):
            return code
    raise RuntimeError("Could not generate a unique invitation code.")
