from .refresh_token_store import RedisRefreshTokenStore

__all__ = ["RedisRefreshTokenStore"]
