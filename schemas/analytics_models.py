"""
Analytics Pydantic Models

Query string for the analytics report. Date parsing and range checks
happen in the analytics service so that a malformed date surfaces as the
same invalid-input error whether it comes from HTTP or a direct call.
"""

from pydantic import BaseModel
from typing import Optional


class AnalyticsQuery(BaseModel):
    timeframe: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
