from typing import Optional
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

# AnyHttpUrl rather than HttpUrl: no length cap on accepted URLs
http_url_adapter = TypeAdapter(AnyHttpUrl)
# longer digit strings cannot fit the 32-bit integer column
MAX_CODE_DIGITS = 9


def is_valid_url(candidate) -> bool:
    if not isinstance(candidate, str) or not candidate:
        return False
    try:
        http_url_adapter.validate_python(candidate)
    except ValidationError:
        return False
    return True


def parse_short_code(raw: str) -> Optional[int]:
    if not raw or len(raw) > MAX_CODE_DIGITS:
        return None
    if not raw.isascii() or not raw.isdigit():
        return None
    return int(raw)
