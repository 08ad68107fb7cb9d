"""Generation of opaque entity IDs ("N1718000000000-k3j9x0a2b")."""

import random
import string
import time

_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(prefix: str) -> str:
    """Return a new ID: prefix, millisecond timestamp, and 9 random base-36 characters."""
    suffix = "".join(random.choices(_ALPHABET, k=9))
    return f"{prefix}{int(time.time() * 1000)}-{suffix}"
