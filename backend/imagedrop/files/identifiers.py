"""Random identifiers used as stored file names."""
import secrets
import uuid


def generate_identifier() -> str:
    """Return a random version-4 UUID in canonical 8-4-4-4-12 form.

    All 122 random bits come from the OS CSPRNG; ``uuid.UUID(version=4)``
    then pins the version nibble to 4 and the variant bits to RFC 4122
    (so the variant nibble is one of 8, 9, a, b).
    """
    return str(uuid.UUID(bytes=secrets.token_bytes(16), version=4))
