#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Primary Ports (入力ポート)

アプリケーションへの入力を定義するインターフェース。
UI層から呼び出されるポート。
"""

from .editor_ports import IBoxStore, IFrameGeometryEditor
from .session_ports import ITestSession, Scheduler

__all__ = [
    # Editor
    "IBoxStore",
    "IFrameGeometryEditor",
    # Session
    "ITestSession",
    "Scheduler",
]
