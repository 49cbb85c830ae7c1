"""Human-readable timestamps for display."""

import time
from typing import Optional


def relative_to_now(timestamp: int, now: Optional[float] = None) -> str:
    """Describe how long ago ``timestamp`` was ("5 minutes ago", "Yesterday")."""
    if now is None:
        now = time.time()
    diff = int(now - timestamp)

    if diff < 60:
        return "Just now"

    if diff < 3600:
        minutes = diff // 60
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"

    if diff < 86400:
        hours = diff // 3600
        return f"{hours} hour{'s' if hours > 1 else ''} ago"

    if diff < 172800:
        return "Yesterday"

    return f"{diff // 86400} days ago"
