#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
テストセッションDTO定義

受験中の回答状態、受験者の操作（アクション）、採点結果の転送用データクラス。
状態はすべて不変で、アクション適用ごとに新しいインスタンスを生成する。
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class FrameAnswerDTO:
    """
    フレーム単位の回答状態

    mistake は一度立つとセッション終了まで解除されない。
    """

    inputs: Dict[str, str] = field(default_factory=dict)  # 入力欄ID -> 入力テキスト（未加工）
    hotspots_clicked: Dict[str, bool] = field(default_factory=dict)  # ホットスポットID -> 正しくクリック済み
    last_correct_order: int = 0
    mistake: bool = False

    def with_input(self, box_id: str, text: str) -> "FrameAnswerDTO":
        inputs = dict(self.inputs)
        inputs[box_id] = text
        return replace(self, inputs=inputs)

    def with_hotspot_clicked(self, box_id: str, order: int) -> "FrameAnswerDTO":
        clicked = dict(self.hotspots_clicked)
        clicked[box_id] = True
        return replace(self, hotspots_clicked=clicked, last_correct_order=order)

    def with_mistake(self) -> "FrameAnswerDTO":
        return replace(self, mistake=True)


class FeedbackKind(Enum):
    """視覚フィードバック種別"""
    CORRECT = "correct"  # 正しいホットスポットのフラッシュ
    INCORRECT = "incorrect"  # 順番違いホットスポットのフラッシュ
    MISTAKE_FLASH = "mistake_flash"  # 描画面全体のミスフラッシュ


@dataclass(frozen=True)
class FeedbackDTO:
    """一時的な視覚フィードバック（採点には影響しない）"""

    correct_hotspot_id: Optional[str] = None
    incorrect_hotspot_id: Optional[str] = None
    mistake_flash: bool = False

    def cleared(self, kind: FeedbackKind) -> "FeedbackDTO":
        if kind == FeedbackKind.CORRECT:
            return replace(self, correct_hotspot_id=None)
        if kind == FeedbackKind.INCORRECT:
            return replace(self, incorrect_hotspot_id=None)
        return replace(self, mistake_flash=False)


@dataclass(frozen=True)
class TestSessionStateDTO:
    """
    テストセッション状態

    answers はフレームインデックス順。reviewing は結果表示（採点確定後の閲覧）状態。
    """

    __test__ = False  # pytestの収集対象外

    answers: Tuple[FrameAnswerDTO, ...]
    current_frame_index: int = 0
    reviewing: bool = False
    feedback: FeedbackDTO = field(default_factory=FeedbackDTO)

    def __post_init__(self):
        """検証"""
        if not self.answers:
            raise ValueError("A test session needs at least one frame")

        if not 0 <= self.current_frame_index < len(self.answers):
            raise ValueError(
                f"Frame index {self.current_frame_index} out of range [0, {len(self.answers) - 1}]"
            )

    @property
    def frame_count(self) -> int:
        return len(self.answers)

    @property
    def current_answer(self) -> FrameAnswerDTO:
        return self.answers[self.current_frame_index]

    @property
    def is_last_frame(self) -> bool:
        return self.current_frame_index == len(self.answers) - 1

    def with_answer(self, index: int, answer: FrameAnswerDTO) -> "TestSessionStateDTO":
        answers = list(self.answers)
        answers[index] = answer
        return replace(self, answers=tuple(answers))

    @classmethod
    def initial(cls, frame_count: int) -> "TestSessionStateDTO":
        """初期状態を生成"""
        return cls(answers=tuple(FrameAnswerDTO() for _ in range(frame_count)))


@dataclass(frozen=True)
class ScoreDTO:
    """
    採点結果

    mistake_frame_count はホットスポットを含むフレームのうちミスがあった数。
    """

    score: int
    total_possible: int
    mistake_frame_count: int

    @property
    def ratio(self) -> float:
        return self.score / self.total_possible if self.total_possible > 0 else 0.0

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return {
            "score": self.score,
            "total_possible": self.total_possible,
            "mistake_frame_count": self.mistake_frame_count,
        }


# === アクション ===

@dataclass(frozen=True)
class InputChanged:
    """入力欄のテキスト変更"""
    box_id: str
    text: str


@dataclass(frozen=True)
class InputBlurred:
    """入力欄のフォーカス喪失"""
    box_id: str


@dataclass(frozen=True)
class HotspotClicked:
    """ホットスポットのクリック"""
    box_id: str


@dataclass(frozen=True)
class SurfaceClicked:
    """ホットスポットにも入力欄にも当たらないクリック"""


@dataclass(frozen=True)
class NavigateNext:
    """次のフレームへ（最終フレームでは結果表示へ）"""


@dataclass(frozen=True)
class NavigatePrevious:
    """前のフレームへ"""


@dataclass(frozen=True)
class AutoAdvance:
    """
    自動遷移（タイマーから発行）

    予約時のフレームインデックスを保持し、既に別フレームへ移動していれば無視される。
    """
    frame_index: int


@dataclass(frozen=True)
class ClearFeedback:
    """視覚フィードバックの解除（タイマーから発行）"""
    kind: FeedbackKind


SessionAction = Union[
    InputChanged, InputBlurred, HotspotClicked, SurfaceClicked,
    NavigateNext, NavigatePrevious, AutoAdvance, ClearFeedback,
]


@dataclass(frozen=True)
class ScheduledActionDTO:
    """遅延実行するアクション（ホスト側のタイマーで実行）"""
    delay_ms: int
    action: SessionAction


@dataclass(frozen=True)
class SessionTransitionDTO:
    """リデューサの出力（新しい状態と後続アクション）"""
    state: TestSessionStateDTO
    effects: Tuple[ScheduledActionDTO, ...] = ()
