import random

SHORT_CODE_LIMIT = 10000


def generate_short_code() -> int:
    """Return a random code in [0, SHORT_CODE_LIMIT).

    Codes are not checked against existing mappings, so two calls can
    return the same value.
    """
    return random.randrange(SHORT_CODE_LIMIT)
