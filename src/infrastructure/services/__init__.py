#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Infrastructure Services

ポートを実装する独立したサービス群。
"""

from .geometry_update_throttle_service import GeometryUpdateThrottleService

__all__ = [
    "GeometryUpdateThrottleService",
]
