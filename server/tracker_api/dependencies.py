"""Shared request dependencies: caller identity and the user's local today."""
from datetime import date
from typing import Optional

from fastapi import Header, HTTPException, Query

from behavior_engine.dates import InvalidTimezoneError, today_in_timezone


async def get_user_id(x_user_id: str = Header(..., min_length=1, description="Authenticated user id")) -> str:
    return x_user_id


async def get_local_today(
    timezone: Optional[str] = Query(default=None, description="IANA timezone, e.g. America/New_York"),
    as_of: Optional[date] = Query(default=None, description="Override the user's local date"),
) -> date:
    """
    Resolve "today" for the caller.

    The timezone is always required and validated, even when as_of is
    given, so a bad client fails the same way every time.
    """
    try:
        today = today_in_timezone(timezone)
    except InvalidTimezoneError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return as_of or today
