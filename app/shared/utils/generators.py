"""ID generators for ORM primary keys."""

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new collision-resistant CUID2 string (story, attachment and user ids)."""
    return str(_next_cuid())
