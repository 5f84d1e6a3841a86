"""
===============================================================================
CRC CARD — schemas/health.py
===============================================================================

Module:
    HTTP schemas for probes (health + database diagnostic)

Notes:
    - Health is always transport-200; the body carries the verdict.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class HealthRes(BaseModel):
    status: Literal["Healthy", "Degraded"]
    database: Literal["Connected", "Disconnected"]
    timestamp: datetime


class DatabaseCheckRes(BaseModel):
    status: str = "success"
    message: str
    server: str
    database: str
