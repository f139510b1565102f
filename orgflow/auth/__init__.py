from .api_keys import generate_api_key
