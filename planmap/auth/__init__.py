from planmap.auth.tokens import create_access_token, decode_access_token
from planmap.auth.passwords import hash_password, verify_password

__all__ = ["create_access_token", "decode_access_token", "hash_password", "verify_password"]
