import secrets

API_KEY_BYTES = 30


def generate_api_key(nbytes: int = API_KEY_BYTES) -> str:
    """Returns a new opaque, URL-safe workspace API key"""
    return secrets.token_urlsafe(nbytes)
