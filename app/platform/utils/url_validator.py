from typing import Tuple


def normalize_url(url: str) -> str:
    """
    Cache-key normalization: prefix https:// when no http(s) scheme is present.
    Trailing slashes, www. and casing are left untouched.
    """
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return f"https://{url}"


def validate_url(url: str) -> Tuple[bool, str, str]:
    """
    Only a missing or blank URL is rejected. Anything else is normalized and
    left to the fetch step, which reports unusable URLs as fetch failures.
    """
    if not url or not url.strip():
        return False, "", "URL is required"

    return True, normalize_url(url.strip()), ""
