from datetime import datetime, timedelta, timezone

# Wednesday, well inside its week, month and year
NOW = datetime(2026, 10, 14, 15, 30, tzinfo=timezone.utc)
LAST_WEEK = NOW - timedelta(days=7)
LAST_MONTH = NOW - timedelta(days=30)
LAST_MINUTE = NOW - timedelta(minutes=2)
