# karaoke_service/rate_limiter.py
import os
import time
from typing import Dict, List

from fastapi import HTTPException, Request, status

# Simple sliding-window rate limiter: N requests / WINDOW seconds per IP+path
WINDOW_SECONDS = 60
MAX_BOOKINGS_PER_WINDOW = 30

_request_log: Dict[str, List[float]] = {}


def booking_rate_limiter(request: Request):
    """
    Rate limit booking mutations per client IP and path.

    Applied to booking create, update and delete so that a misbehaving
    client cannot hammer the conflict check.
    """
    # Skip rate limiting completely in automated tests
    if os.getenv("TESTING") == "1":
        return
    client_ip = request.client.host if request.client else "unknown"
    key = f"{client_ip}:{request.url.path}"

    now = time.time()
    window_start = now - WINDOW_SECONDS

    timestamps = _request_log.get(key, [])
    # keep only timestamps inside the window
    timestamps = [ts for ts in timestamps if ts >= window_start]

    if len(timestamps) >= MAX_BOOKINGS_PER_WINDOW:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many booking operations in a short time",
        )

    timestamps.append(now)
    _request_log[key] = timestamps
