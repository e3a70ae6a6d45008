"""
Identifier generation utilities.

Exercise ids are opaque random tokens. They are never derived from the
exercise content, so two identical exercises on one day stay distinct.
"""

import secrets

ID_LENGTH = 7
_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def generate_id(prefix: str = "", taken: set[str] | None = None) -> str:
    """
    Generate a short random identifier.

    Args:
        prefix: Optional prefix prepended to the random part.
        taken: Identifiers already in use; the result is guaranteed not to be one of them.

    Returns:
        New identifier string.
    """
    taken = taken or set()

    while True:
        token = prefix + "".join(secrets.choice(_ALPHABET) for _ in range(ID_LENGTH))
        if token not in taken:
            return token
