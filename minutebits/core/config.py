from shared.config import BaseServiceConfig


class Settings(BaseServiceConfig):
    # Redis
    key_namespace: str = "minutebits"

    # Tracking
    time_spans: list[str] = ["year", "month", "week", "day", "hour", "minute"]
    silent: bool = False  # swallow connection errors in track()
    use_operations_cache: bool = True
    max_identifier: int = 2**32 - 1  # highest bit offset SETBIT accepts

    # HTTP service startup
    redis_connect_retries: int = 6

    otel_service_name: str = "minutebits"


settings = Settings()
