class RedisKeys:
    """Centralised Redis key pattern definitions"""

    DEFAULT_NAMESPACE = "minutebits"
    SEPARATOR = ":"
    # SCAN MATCH glob syntax plus the separator itself
    RESERVED_NAMESPACE_CHARACTERS = ":*?[]\\"

    # Key families under a namespace
    EVENTS_SEGMENT = "events"

    # Base bitmap: one per event, granularity and bucket
    EVENT_BITMAP = "{namespace}:events:{event}:{granularity}:{bucket}"

    # Derived bitmap: operator applied to encoded operand keys
    OPERATION_BITMAP = "{namespace}:ops:{operator}({operands})"

    @classmethod
    def event_key(
        cls, namespace: str, event: str, granularity: str, bucket: int
    ) -> str:
        """Generate the base bitmap key for an event bucket."""
        return cls.EVENT_BITMAP.format(
            namespace=namespace, event=event, granularity=granularity, bucket=bucket
        )

    @classmethod
    def operation_key(cls, namespace: str, operator: str, operands: str) -> str:
        """Generate the derived bitmap key for an encoded operator chain."""
        return cls.OPERATION_BITMAP.format(
            namespace=namespace, operator=operator, operands=operands
        )

    @classmethod
    def events_pattern(cls, namespace: str) -> str:
        """SCAN pattern matching every base bitmap in a namespace."""
        return f"{namespace}:{cls.EVENTS_SEGMENT}:*"

    @classmethod
    def namespace_pattern(cls, namespace: str) -> str:
        return f"{namespace}:*"
