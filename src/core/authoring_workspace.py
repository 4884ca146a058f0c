#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
オーサリングワークスペース

フレームコレクションを所有し、フレーム移動・ボックス編集・テスト開始・
パッケージの入出力を提供する。IBoxStore の実装として
FrameGeometryEditor / BoxManipulator から編集中フレームのボックスを操作される。
"""
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union
import logging

from core.notice_board import NoticeBoard
from core.test_session import TestSessionEngine
from domain.dto.box_dto import (
    BoxDTO, BoxType, HotspotDTO, InputFieldDTO, new_box_id, update_box as updated_box
)
from domain.dto.frame_dto import FrameAssetDTO
from domain.dto.settings_dto import EditorSettingsDTO, SessionSettingsDTO
from domain.ports.primary.session_ports import Scheduler
from domain.ports.secondary.package_ports import ITestPackageRepository, MalformedPackageError
from domain.ports.secondary.video_ports import IFrameExtractor, ProgressCallback
from domain.vo.box_geometry import PercentRect, clamp_rect

logger = logging.getLogger(__name__)


class AuthoringWorkspace:
    """
    オーサリングワークスペース

    フレームは不変オブジェクトで、編集のたびに差し替える。
    変更があるたびに登録されたリスナーを呼ぶ。
    """

    def __init__(self, frame_extractor: Optional[IFrameExtractor] = None,
                 package_repository: Optional[ITestPackageRepository] = None,
                 notice_board: Optional[NoticeBoard] = None,
                 editor_settings: Optional[EditorSettingsDTO] = None,
                 session_settings: Optional[SessionSettingsDTO] = None):
        """
        Args:
            frame_extractor: 動画からのフレーム抽出
            package_repository: テストパッケージの入出力
            notice_board: 作成者向け通知
            editor_settings: エディタ設定（既定ボックスの配置）
            session_settings: テストセッション設定
        """
        self._frame_extractor = frame_extractor
        self._package_repository = package_repository
        self._notice_board = notice_board or NoticeBoard()
        self._editor_settings = editor_settings or EditorSettingsDTO()
        self._session_settings = session_settings or SessionSettingsDTO()

        self._frames: List[FrameAssetDTO] = []
        self._current_index = 0
        self._selected_box_id: Optional[str] = None
        self._session: Optional[TestSessionEngine] = None
        self._listeners: List[Callable[[], None]] = []

    # === 状態 ===

    @property
    def notice_board(self) -> NoticeBoard:
        return self._notice_board

    @property
    def editor_settings(self) -> EditorSettingsDTO:
        return self._editor_settings

    @property
    def frames(self) -> Tuple[FrameAssetDTO, ...]:
        return tuple(self._frames)

    @property
    def has_project(self) -> bool:
        return bool(self._frames)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_frame(self) -> Optional[FrameAssetDTO]:
        if not self._frames:
            return None
        return self._frames[self._current_index]

    @property
    def included_frames(self) -> Tuple[FrameAssetDTO, ...]:
        return tuple(frame for frame in self._frames if frame.include_in_test)

    @property
    def selected_box_id(self) -> Optional[str]:
        return self._selected_box_id

    @property
    def selected_box(self) -> Optional[BoxDTO]:
        if self._selected_box_id is None:
            return None
        return self.get_box(self._selected_box_id)

    @property
    def session(self) -> Optional[TestSessionEngine]:
        return self._session

    def add_listener(self, listener: Callable[[], None]) -> None:
        """変更の通知先を追加"""
        self._listeners.append(listener)

    # === 読み込み ===

    def load_frames(self, frames: Sequence[FrameAssetDTO]) -> None:
        """フレームコレクションを差し替え"""
        self._reset(list(frames))
        logger.info(f"Loaded {len(self._frames)} frames")

    def load_video(self, path: Union[str, Path],
                   progress: Optional[ProgressCallback] = None) -> int:
        """
        動画からフレームを抽出して読み込む

        Returns:
            読み込んだフレーム数

        Raises:
            ValueError: 動画が大きすぎる場合
            IOError: 動画を読み込めない場合
        """
        if self._frame_extractor is None:
            raise RuntimeError("No frame extractor configured")

        try:
            frames = self._frame_extractor.extract_frames(path, progress)
        except ValueError as e:
            self._notice_board.warn(str(e))
            raise
        except IOError as e:
            self._notice_board.error(f"Failed to read video: {e}")
            raise

        self.load_frames(frames)
        return len(frames)

    def import_package(self, path: Union[str, Path]) -> int:
        """
        テストパッケージを読み込む（すべてのフレームがテスト対象になる）

        失敗時はフレームコレクションを空にしてから例外を再送出する。

        Returns:
            読み込んだフレーム数

        Raises:
            FileNotFoundError: ファイルが無い場合
            MalformedPackageError: パッケージが不正な場合
        """
        if self._package_repository is None:
            raise RuntimeError("No package repository configured")

        try:
            frames = self._package_repository.load(path)
        except (FileNotFoundError, MalformedPackageError) as e:
            self._reset([])
            self._notice_board.error(f"Failed to import package: {e}")
            raise

        self.load_frames(frames)
        logger.info(f"Imported package {path} ({len(frames)} frames)")
        return len(frames)

    # === フレーム移動 ===

    def go_to_frame(self, index: int) -> None:
        if not self._frames:
            return
        index = max(0, min(index, len(self._frames) - 1))
        if index == self._current_index:
            return
        self._current_index = index
        self._selected_box_id = None
        self._notify()

    def previous_frame(self) -> None:
        self.go_to_frame(self._current_index - 1)

    def next_frame(self) -> None:
        self.go_to_frame(self._current_index + 1)

    def set_frame_included(self, included: bool) -> None:
        """編集中フレームのテスト対象フラグを変更（除外時は選択解除）"""
        frame = self.current_frame
        if frame is None or frame.include_in_test == included:
            return
        self._replace_current(frame.with_inclusion(included))
        if not included:
            self._selected_box_id = None
        self._notify()

    # === ボックス編集 ===

    def add_box(self, box_type: BoxType) -> Optional[BoxDTO]:
        """
        既定位置にボックスを追加して選択

        Returns:
            追加したボックス（除外フレームなどで追加できない場合はNone）
        """
        frame = self._editable_frame()
        if frame is None:
            return None

        settings = self._editor_settings
        rect = clamp_rect(PercentRect(
            x=settings.default_box_x,
            y=settings.default_box_y,
            w=settings.default_box_w,
            h=settings.default_box_h,
        ))
        if box_type == BoxType.HOTSPOT:
            box: BoxDTO = HotspotDTO(id=new_box_id(), rect=rect, order=frame.next_hotspot_order())
        else:
            box = InputFieldDTO(id=new_box_id(), rect=rect)

        self.append_box(box)
        self.select_box(box.id)
        return box

    def update_box(self, box_id: str, **changes) -> Optional[BoxDTO]:
        """
        ボックスのラベル・順序・期待値・ジオメトリを変更

        Raises:
            ValueError: 種別に存在しないフィールドや不正な値の場合
        """
        frame = self._editable_frame()
        box = frame.find_box(box_id) if frame is not None else None
        if box is None:
            return None

        if "rect" in changes:
            changes["rect"] = clamp_rect(changes["rect"])
        new_box = updated_box(box, **changes)
        self._replace_current(frame.with_box_replaced(new_box))
        self._notify()
        return new_box

    def delete_box(self, box_id: str) -> bool:
        frame = self._editable_frame()
        if frame is None or frame.find_box(box_id) is None:
            return False

        self._replace_current(frame.without_box(box_id))
        if self._selected_box_id == box_id:
            self._selected_box_id = None
        logger.debug(f"Box deleted: {box_id}")
        self._notify()
        return True

    # === IBoxStore ===

    def get_box(self, box_id: str) -> Optional[BoxDTO]:
        frame = self.current_frame
        return frame.find_box(box_id) if frame is not None else None

    def set_box_rect(self, box_id: str, rect: PercentRect) -> None:
        self.update_box(box_id, rect=rect)

    def append_box(self, box: BoxDTO) -> None:
        frame = self._editable_frame()
        if frame is None:
            return
        self._replace_current(frame.with_box_appended(box))
        logger.debug(f"Box added: {box.box_type.value} {box.id}")
        self._notify()

    def select_box(self, box_id: Optional[str]) -> None:
        if box_id is not None and self.get_box(box_id) is None:
            return
        if box_id == self._selected_box_id:
            return
        self._selected_box_id = box_id
        self._notify()

    # === テスト ===

    def start_test(self, scheduler: Optional[Scheduler] = None) -> Optional[TestSessionEngine]:
        """
        テスト対象フレームのスナップショットでセッションを開始

        Returns:
            セッション（テスト対象フレームが無い場合はNone）
        """
        included = self.included_frames
        if not included:
            self._notice_board.warn("No frames are included in the test")
            return None

        self.exit_test()
        self._session = TestSessionEngine(included, self._session_settings, scheduler)
        self._notify()
        return self._session

    def exit_test(self) -> None:
        """セッションを破棄"""
        if self._session is None:
            return
        self._session.close()
        self._session = None
        self._notify()

    # === エクスポート ===

    def export_package(self, path: Union[str, Path]) -> bool:
        """
        テスト対象フレームをパッケージとして書き出す

        Returns:
            書き出したらTrue（テスト対象フレームが無い場合はFalse）
        """
        if self._package_repository is None:
            raise RuntimeError("No package repository configured")

        included = self.included_frames
        if not included:
            self._notice_board.warn("No frames are included in the test")
            return False

        self._package_repository.save(included, path)
        logger.info(f"Exported {len(included)} of {len(self._frames)} frames to {path}")
        return True

    # === 内部 ===

    def _reset(self, frames: List[FrameAssetDTO]) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
        self._frames = frames
        self._current_index = 0
        self._selected_box_id = None
        self._notify()

    def _editable_frame(self) -> Optional[FrameAssetDTO]:
        """編集可能な現在フレーム（除外フレームは編集不可）"""
        frame = self.current_frame
        if frame is None or not frame.include_in_test:
            return None
        return frame

    def _replace_current(self, frame: FrameAssetDTO) -> None:
        self._frames[self._current_index] = frame

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
