"""ID Generation Utilities"""
import uuid
from datetime import datetime, timezone


def generate_id() -> str:
    """UUID string for string-keyed rows (Users.Id, Roles.Id)"""
    return str(uuid.uuid4())


def generate_correlation_id() -> str:
    """
    Generate a correlation ID for request tracing

    Returns:
        Correlation ID string with timestamp prefix
    """
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    unique_part = uuid.uuid4().hex[:8]
    return f"COR-{timestamp}-{unique_part}"
