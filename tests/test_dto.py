#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DTOクラスのテスト
"""
import pytest
import numpy as np

from domain.dto import (
    BoxType, HotspotDTO, InputFieldDTO, FrameAssetDTO, update_box, is_hotspot, is_input_field,
    FrameAnswerDTO, FeedbackDTO, FeedbackKind, TestSessionStateDTO, ScoreDTO,
    EditorSettingsDTO, SessionSettingsDTO, ExtractionSettingsDTO, PackageSettingsDTO
)
from domain.vo import PercentRect


RECT = PercentRect(x=10, y=10, w=20, h=10)


def image(width: int = 64, height: int = 48) -> np.ndarray:
    return np.zeros((height, width, 3), dtype=np.uint8)


class TestBoxDTO:
    """ボックスDTOのテスト"""

    def test_defaults(self):
        """既定のラベルと順序"""
        hotspot = HotspotDTO(id="h", rect=RECT)
        field = InputFieldDTO(id="i", rect=RECT)

        assert hotspot.label == "New Hotspot"
        assert hotspot.order == 1
        assert hotspot.box_type == BoxType.HOTSPOT
        assert field.label == "New Input"
        assert field.expected == ""
        assert field.box_type == BoxType.INPUT
        assert is_hotspot(hotspot) and not is_input_field(hotspot)

    def test_hotspot_validation(self):
        """ホットスポットのバリデーション"""
        with pytest.raises(ValueError):
            HotspotDTO(id="", rect=RECT)

        # 順序は1以上の整数
        with pytest.raises(ValueError):
            HotspotDTO(id="h", rect=RECT, order=0)
        with pytest.raises(ValueError):
            HotspotDTO(id="h", rect=RECT, order=1.5)
        with pytest.raises(ValueError):
            HotspotDTO(id="h", rect=RECT, order=True)

    def test_input_validation(self):
        with pytest.raises(ValueError):
            InputFieldDTO(id="i", rect=RECT, expected=None)

    def test_update_box_keeps_type_and_id(self):
        hotspot = HotspotDTO(id="h", rect=RECT)
        updated = update_box(hotspot, label="Start", order=3)

        assert isinstance(updated, HotspotDTO)
        assert (updated.id, updated.label, updated.order) == ("h", "Start", 3)
        assert hotspot.label == "New Hotspot"  # 元は不変

    def test_update_box_rejects_foreign_fields(self):
        """種別に存在しないフィールドは変更不可"""
        with pytest.raises(ValueError):
            update_box(HotspotDTO(id="h", rect=RECT), expected="x")
        with pytest.raises(ValueError):
            update_box(InputFieldDTO(id="i", rect=RECT), order=2)
        with pytest.raises(ValueError):
            update_box(InputFieldDTO(id="i", rect=RECT), id="other")

    def test_update_box_validates_values(self):
        with pytest.raises(ValueError):
            update_box(HotspotDTO(id="h", rect=RECT), order=0)


class TestFrameAssetDTO:
    """FrameAssetDTOのテスト"""

    def test_from_image(self):
        frame = FrameAssetDTO.from_image(image(), timestamp=1.5)

        assert (frame.original_width, frame.original_height) == (64, 48)
        assert frame.timestamp == 1.5
        assert frame.include_in_test
        assert frame.boxes == ()
        assert frame.id

    def test_validation(self):
        """FrameAssetDTOのバリデーション"""
        # 不正なデータ形状
        with pytest.raises(ValueError):
            FrameAssetDTO(id="f", image=np.zeros((48, 64), dtype=np.uint8),
                          original_width=64, original_height=48)

        # 不正なデータ型
        with pytest.raises(ValueError):
            FrameAssetDTO(id="f", image=np.zeros((48, 64, 3), dtype=np.float32),
                          original_width=64, original_height=48)

        # 不正な解像度
        with pytest.raises(ValueError):
            FrameAssetDTO(id="f", image=image(), original_width=0, original_height=48)

    def test_duplicate_box_ids_rejected(self):
        with pytest.raises(ValueError):
            FrameAssetDTO.from_image(image()).with_boxes([
                HotspotDTO(id="same", rect=RECT), InputFieldDTO(id="same", rect=RECT),
            ])

    def test_box_queries(self):
        hotspot = HotspotDTO(id="h", rect=RECT, order=4)
        field = InputFieldDTO(id="i", rect=RECT)
        frame = FrameAssetDTO.from_image(image()).with_boxes([field, hotspot])

        assert frame.hotspots == (hotspot,)
        assert frame.input_fields == (field,)
        assert frame.has_hotspots
        assert not frame.is_input_only
        assert frame.find_box("i") is field
        assert frame.find_box("missing") is None
        assert frame.next_hotspot_order() == 5

    def test_input_only(self):
        empty = FrameAssetDTO.from_image(image())
        assert not empty.is_input_only
        assert empty.next_hotspot_order() == 1
        assert empty.with_box_appended(InputFieldDTO(id="i", rect=RECT)).is_input_only

    def test_immutable_edits(self):
        frame = FrameAssetDTO.from_image(image()).with_box_appended(HotspotDTO(id="h", rect=RECT))

        replaced = frame.with_box_replaced(HotspotDTO(id="h", rect=RECT, label="Changed"))
        assert replaced.boxes[0].label == "Changed"
        assert frame.boxes[0].label == "New Hotspot"

        assert frame.without_box("h").boxes == ()
        assert not frame.with_inclusion(False).include_in_test
        assert frame.with_inclusion(False).id == frame.id


class TestSessionDTO:
    """セッションDTOのテスト"""

    def test_initial_state(self):
        state = TestSessionStateDTO.initial(3)
        assert state.frame_count == 3
        assert state.current_frame_index == 0
        assert not state.reviewing
        assert state.current_answer == FrameAnswerDTO()

    def test_state_validation(self):
        with pytest.raises(ValueError):
            TestSessionStateDTO.initial(0)
        with pytest.raises(ValueError):
            TestSessionStateDTO(answers=(FrameAnswerDTO(),), current_frame_index=1)

    def test_answer_updates_are_copies(self):
        answer = FrameAnswerDTO()
        typed = answer.with_input("i", "text")
        clicked = typed.with_hotspot_clicked("h", 1)

        assert answer.inputs == {}
        assert typed.inputs == {"i": "text"}
        assert clicked.hotspots_clicked == {"h": True}
        assert clicked.last_correct_order == 1
        assert clicked.with_mistake().mistake

    def test_feedback_cleared_per_kind(self):
        feedback = FeedbackDTO(correct_hotspot_id="a", incorrect_hotspot_id="b", mistake_flash=True)

        assert feedback.cleared(FeedbackKind.CORRECT).correct_hotspot_id is None
        assert feedback.cleared(FeedbackKind.INCORRECT).incorrect_hotspot_id is None
        assert not feedback.cleared(FeedbackKind.MISTAKE_FLASH).mistake_flash
        assert feedback.cleared(FeedbackKind.CORRECT).mistake_flash

    def test_score_ratio(self):
        assert ScoreDTO(score=3, total_possible=4, mistake_frame_count=0).ratio == 0.75
        assert ScoreDTO(score=0, total_possible=0, mistake_frame_count=0).ratio == 0.0
        assert ScoreDTO(1, 2, 1).to_dict() == {"score": 1, "total_possible": 2, "mistake_frame_count": 1}


class TestSettingsDTO:
    """設定DTOのテスト"""

    def test_defaults(self):
        editor = EditorSettingsDTO()
        assert (editor.click_max_duration_ms, editor.click_max_distance_px) == (250, 5)
        assert editor.min_resize_px == 10

        session = SessionSettingsDTO()
        assert (session.correct_feedback_ms, session.incorrect_feedback_ms) == (300, 700)
        assert (session.input_advance_ms, session.mistake_flash_ms) == (100, 700)

        assert PackageSettingsDTO().jpeg_quality == 90
        assert ExtractionSettingsDTO().max_frames == 10

    def test_from_dict_ignores_unknown_keys(self):
        settings = EditorSettingsDTO.from_dict({"min_resize_px": 20, "theme": "dark"})
        assert settings.min_resize_px == 20

    def test_dict_round_trip(self):
        settings = SessionSettingsDTO(correct_feedback_ms=10)
        assert SessionSettingsDTO.from_dict(settings.to_dict()) == settings

    def test_validation(self):
        with pytest.raises(ValueError):
            EditorSettingsDTO(click_max_duration_ms=0)
        with pytest.raises(ValueError):
            EditorSettingsDTO(default_box_w=150)
        with pytest.raises(ValueError):
            SessionSettingsDTO(mistake_flash_ms=-1)
        with pytest.raises(ValueError):
            ExtractionSettingsDTO(target_fps=0)
        with pytest.raises(ValueError):
            PackageSettingsDTO(jpeg_quality=101)
