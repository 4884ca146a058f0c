#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Core (中核エンジン)

ボックス操作・ジェスチャー判別・テストセッション状態機械、
およびフレームコレクションを所有するオーサリングワークスペース。
"""

from .viewport_events import ViewportEventHub, PointerSubscription
from .box_manipulator import BoxManipulator, compute_drag_rect, compute_resize_rect
from .frame_geometry_editor import FrameGeometryEditor, classify_draw
from .test_session import TestSessionEngine, reduce, compute_score, answers_match, hit_test
from .notice_board import NoticeBoard
from .authoring_workspace import AuthoringWorkspace

__all__ = [
    # Pointer
    "ViewportEventHub",
    "PointerSubscription",
    # Geometry
    "BoxManipulator",
    "compute_drag_rect",
    "compute_resize_rect",
    "FrameGeometryEditor",
    "classify_draw",
    # Session
    "TestSessionEngine",
    "reduce",
    "compute_score",
    "answers_match",
    "hit_test",
    # Workspace
    "NoticeBoard",
    "AuthoringWorkspace",
]
