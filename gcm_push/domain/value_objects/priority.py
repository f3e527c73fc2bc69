from __future__ import annotations

from enum import Enum


class Priority(str, Enum):
    NORMAL = "normal"
    HIGH = "high"
