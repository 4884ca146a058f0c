#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data Transfer Objects (DTO)

レイヤー間のデータ転送に使用する純粋なデータクラス。
外部ライブラリの型を含まず、プリミティブ型とnumpyのみを使用。
"""

from .box_dto import (
    BoxType, BoxDTO, HotspotDTO, InputFieldDTO,
    DEFAULT_HOTSPOT_LABEL, DEFAULT_INPUT_LABEL,
    new_box_id, update_box, is_hotspot, is_input_field
)
from .frame_dto import FrameAssetDTO, new_frame_id
from .gesture_dto import (
    GestureKind, GestureOutcome, PointerEventDTO,
    DragGestureDTO, ResizeGestureDTO, DrawGestureDTO
)
from .session_dto import (
    FrameAnswerDTO, FeedbackKind, FeedbackDTO, TestSessionStateDTO, ScoreDTO,
    InputChanged, InputBlurred, HotspotClicked, SurfaceClicked,
    NavigateNext, NavigatePrevious, AutoAdvance, ClearFeedback,
    SessionAction, ScheduledActionDTO, SessionTransitionDTO
)
from .notice_dto import NoticeDTO, NoticeLevel
from .settings_dto import (
    EditorSettingsDTO, SessionSettingsDTO, ExtractionSettingsDTO, PackageSettingsDTO
)
from .package_dto import (
    ManifestHotspotDTO, ManifestInputDTO, ManifestFrameDTO, TestManifestDTO, image_name_for
)

__all__ = [
    # Box
    "BoxType",
    "BoxDTO",
    "HotspotDTO",
    "InputFieldDTO",
    "DEFAULT_HOTSPOT_LABEL",
    "DEFAULT_INPUT_LABEL",
    "new_box_id",
    "update_box",
    "is_hotspot",
    "is_input_field",
    # Frame
    "FrameAssetDTO",
    "new_frame_id",
    # Gesture
    "GestureKind",
    "GestureOutcome",
    "PointerEventDTO",
    "DragGestureDTO",
    "ResizeGestureDTO",
    "DrawGestureDTO",
    # Session
    "FrameAnswerDTO",
    "FeedbackKind",
    "FeedbackDTO",
    "TestSessionStateDTO",
    "ScoreDTO",
    "InputChanged",
    "InputBlurred",
    "HotspotClicked",
    "SurfaceClicked",
    "NavigateNext",
    "NavigatePrevious",
    "AutoAdvance",
    "ClearFeedback",
    "SessionAction",
    "ScheduledActionDTO",
    "SessionTransitionDTO",
    # Notice
    "NoticeDTO",
    "NoticeLevel",
    # Settings
    "EditorSettingsDTO",
    "SessionSettingsDTO",
    "ExtractionSettingsDTO",
    "PackageSettingsDTO",
    # Package
    "ManifestHotspotDTO",
    "ManifestInputDTO",
    "ManifestFrameDTO",
    "TestManifestDTO",
    "image_name_for",
]
