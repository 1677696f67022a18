"""
palettekit Generation ID Utilities
Generate unique ids for correlating palette generation log lines.
"""
import uuid
from datetime import datetime


def generate_generation_id() -> str:
    """
    Generate a unique palette generation id.

    Returns:
        Id string of the form ``pal-<timestamp>-<short uuid>``
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = str(uuid.uuid4())[:8]
    return f"pal-{timestamp}-{short_uuid}"

