#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
UIモジュール

Hotspot Test BuilderのUIコンポーネント
"""

from .box_editor_panel import BoxEditorPanel, FrameNavigatorWidget
from .frame_canvas_widget import FrameCanvasWidget
from .main_window import MainWindow
from .status_bar_widgets import FrameCounter, NoticeMessage
from .test_player_widget import TestFrameView, TestPlayerWidget, qt_scheduler

__all__ = [
    "BoxEditorPanel",
    "FrameNavigatorWidget",
    "FrameCanvasWidget",
    "MainWindow",
    "FrameCounter",
    "NoticeMessage",
    "TestFrameView",
    "TestPlayerWidget",
    "qt_scheduler",
]
