# common/logger/logger_middleware/middleware_types.py
"""
Type definitions for request logging middleware.
"""

from typing import Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, computed_field

DEFAULT_SLOW_REQUEST_MS = 1000.0


class PerformanceBreakdown(BaseModel):
    """Where the request spent its time."""

    total_ms: float
    app_logic_ms: float
    db_session_total_ms: float
    sql_execution_total_ms: float
    query_count: int = Field(0, description="Number of SQL statements executed")

    @property
    def db_overhead_ms(self) -> float:
        """Session time (pool checkout, commit) not spent executing SQL."""
        return round(self.db_session_total_ms - self.sql_execution_total_ms, 2)


class RequestMetadata(BaseModel):
    """Core request metadata, always captured."""

    method: str = Field(..., description="HTTP method")
    path: str = Field(..., description="Request path without query params")
    status_code: int = Field(..., ge=100, le=599)
    duration_ms: float = Field(..., ge=0)

    model_config = {"frozen": True}

    @computed_field
    def duration_seconds(self) -> float:
        return round(self.duration_ms / 1000, 3)


class RequestDetails(BaseModel):
    """Extended request details, optional."""

    client_host: Optional[str] = Field(None, description="Client IP address")
    user_agent: Optional[str] = Field(None)
    query_params: Optional[Dict[str, Any]] = Field(None)
    path_params: Optional[Dict[str, Any]] = Field(None)
    request_id: Optional[str] = Field(None)
    content_length: Optional[int] = Field(None, ge=0)

    model_config = {"frozen": True}


class RequestLogEntry(BaseModel):
    """
    Complete request log entry. Serializes cleanly to JSON for persistence.
    """

    timestamp: datetime = Field(default_factory=datetime.now)
    metadata: RequestMetadata
    details: Optional[RequestDetails] = None
    performance: Optional[PerformanceBreakdown] = None
    slow_query_threshold_ms: float = Field(DEFAULT_SLOW_REQUEST_MS, exclude=True)

    model_config = {"frozen": True}

    @computed_field
    def is_slow(self) -> bool:
        return self.metadata.duration_ms > DEFAULT_SLOW_REQUEST_MS

    @computed_field
    def is_error(self) -> bool:
        return self.metadata.status_code >= 500

    @computed_field
    def optimization_warnings(self) -> list[str]:
        """
        Warnings about query volume and SQL time.

        The daily revenue endpoint issues one lookup per return visit, so a
        high query count on it is expected; everywhere else it usually means
        a missing eager load.
        """
        warns: list[str] = []
        if not self.performance:
            return warns

        threshold = self.slow_query_threshold_ms
        total_time = self.metadata.duration_ms
        sql_time = self.performance.sql_execution_total_ms
        query_count = self.performance.query_count

        if query_count > 10:
            warns.append(f"N+1_QUERY_SUSPECTED: {query_count} queries")
        elif query_count > 5:
            warns.append(f"HIGH_QUERY_COUNT: {query_count} queries")

        if sql_time > threshold:
            warns.append(f"SLOW_SQL: statements took {sql_time:.0f}ms")

        db_overhead = self.performance.db_overhead_ms
        if db_overhead > threshold / 2 and db_overhead > total_time * 0.3:
            warns.append(f"HIGH_CONNECTION_OVERHEAD: {db_overhead:.0f}ms")

        return warns


__all__ = [
    "RequestMetadata",
    "RequestDetails",
    "RequestLogEntry",
    "PerformanceBreakdown",
    "DEFAULT_SLOW_REQUEST_MS",
]
