import os


class MetaConfig:
    # ===== GRAPH API =====
    API_VERSION: str = os.getenv("META_API_VERSION", "v24.0")
    GRAPH_HOST: str = os.getenv("META_GRAPH_HOST", "https://graph.facebook.com")

    # ===== TIMEOUTS (seconds) =====
    HTTP_TIMEOUT: float = float(os.getenv("META_HTTP_TIMEOUT", "60"))
    CONNECT_TIMEOUT: float = float(os.getenv("META_CONNECT_TIMEOUT", "10"))

    # ===== RETRIES (reads only, creation calls are never retried) =====
    MAX_GET_ATTEMPTS: int = int(os.getenv("META_MAX_GET_ATTEMPTS", "4"))
    RETRY_BASE_DELAY: float = float(os.getenv("META_RETRY_BASE_DELAY", "1.0"))

    # ===== CREDENTIAL =====
    TOKEN_EXPIRY_WARNING_MINUTES: int = int(os.getenv("META_TOKEN_EXPIRY_WARNING_MINUTES", "15"))

    # Graph error codes that mean "slow down" rather than "request is wrong"
    RATE_LIMIT_ERROR_CODES: frozenset[int] = frozenset(
        {4, 17, 32, 613, *range(80000, 80015)}
    )
    RATE_LIMIT_ERROR_SUBCODES: frozenset[int] = frozenset({2446003})


META_BASE_URL = f"{MetaConfig.GRAPH_HOST}/{MetaConfig.API_VERSION}"
