#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
メインウィンドウ

Hotspot Test Builderのメインアプリケーションウィンドウ。
メニューバー、ツールバー、ステータスバーと、
オーサリング画面 / テストプレイヤーの切り替えを含む。
"""
import logging
from pathlib import Path
from typing import Optional, Union

from PyQt6.QtCore import Qt, QSettings
from PyQt6.QtGui import QAction, QKeySequence, QCloseEvent
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QSplitter, QStackedWidget,
    QFileDialog, QProgressDialog, QApplication
)

from core.authoring_workspace import AuthoringWorkspace
from domain.dto.settings_dto import PackageSettingsDTO
from domain.ports.secondary.package_ports import MalformedPackageError
from domain.ports.secondary.performance_ports import IGeometryUpdateThrottle
from .box_editor_panel import BoxEditorPanel, FrameNavigatorWidget
from .frame_canvas_widget import FrameCanvasWidget
from .status_bar_widgets import FrameCounter, NoticeMessage
from .test_player_widget import TestPlayerWidget, qt_scheduler

logger = logging.getLogger(__name__)


VIDEO_FILE_FILTER = "Video files (*.mp4 *.mov *.avi *.mkv *.webm);;All files (*)"
PACKAGE_FILE_FILTER = "Test packages (*.zip);;All files (*)"


class MainWindow(QMainWindow):
    """メインウィンドウクラス

    ワークスペースの状態を各ウィジェットに反映し、
    ファイル操作とテストの開始・終了を仲介する。
    """

    def __init__(self, workspace: AuthoringWorkspace,
                 package_settings: Optional[PackageSettingsDTO] = None,
                 throttle: Optional[IGeometryUpdateThrottle] = None):
        logger.debug("MainWindow.__init__ started")
        super().__init__()

        self.workspace = workspace
        self.package_settings = package_settings or PackageSettingsDTO()
        self._throttle = throttle
        self.test_player: Optional[TestPlayerWidget] = None

        self.settings = QSettings("HotspotTestBuilder", "MainWindow")

        self._setup_ui()
        self._setup_menus()
        self._setup_toolbars()
        self._setup_statusbar()
        self._restore_window_state()

        workspace.add_listener(self._update_ui_state)
        self._update_ui_state()
        logger.debug("MainWindow.__init__ completed")

    def _setup_ui(self) -> None:
        """UIをセットアップ"""
        self.setWindowTitle("Hotspot Test Builder")
        self.resize(1280, 800)

        self.stack = QStackedWidget(self)
        self.setCentralWidget(self.stack)

        # オーサリング画面
        self.editor_page = QWidget()
        editor_layout = QVBoxLayout(self.editor_page)
        editor_layout.setContentsMargins(4, 4, 4, 4)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        self.canvas = FrameCanvasWidget(self.workspace, throttle=self._throttle)
        splitter.addWidget(self.canvas)
        self.box_editor = BoxEditorPanel(self.workspace)
        self.box_editor.setMinimumWidth(260)
        splitter.addWidget(self.box_editor)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 0)
        editor_layout.addWidget(splitter, 1)

        self.navigator = FrameNavigatorWidget(self.workspace)
        editor_layout.addWidget(self.navigator)

        self.stack.addWidget(self.editor_page)

    def _setup_menus(self) -> None:
        """メニューバーをセットアップ"""
        menubar = self.menuBar()

        # ファイルメニュー
        file_menu = menubar.addMenu("&File")

        self.action_open_video = QAction("Open Video...", self)
        self.action_open_video.setShortcut(QKeySequence.StandardKey.Open)
        self.action_open_video.triggered.connect(self._on_open_video)
        file_menu.addAction(self.action_open_video)

        self.action_import_package = QAction("Import Package...", self)
        self.action_import_package.setShortcut(QKeySequence("Ctrl+I"))
        self.action_import_package.triggered.connect(self._on_import_package)
        file_menu.addAction(self.action_import_package)

        self.action_export_package = QAction("Export Package...", self)
        self.action_export_package.setShortcut(QKeySequence("Ctrl+E"))
        self.action_export_package.triggered.connect(self._on_export_package)
        file_menu.addAction(self.action_export_package)

        file_menu.addSeparator()

        self.action_exit = QAction("Exit", self)
        self.action_exit.setShortcut(QKeySequence.StandardKey.Quit)
        self.action_exit.triggered.connect(self.close)
        file_menu.addAction(self.action_exit)

        # 編集メニュー
        edit_menu = menubar.addMenu("&Edit")

        self.action_delete_box = QAction("Delete Box", self)
        self.action_delete_box.setShortcut(QKeySequence.StandardKey.Delete)
        self.action_delete_box.triggered.connect(self._on_delete_box)
        edit_menu.addAction(self.action_delete_box)

        edit_menu.addSeparator()

        self.action_previous_frame = QAction("Previous Frame", self)
        self.action_previous_frame.setShortcut(QKeySequence("PgUp"))
        self.action_previous_frame.triggered.connect(self.workspace.previous_frame)
        edit_menu.addAction(self.action_previous_frame)

        self.action_next_frame = QAction("Next Frame", self)
        self.action_next_frame.setShortcut(QKeySequence("PgDown"))
        self.action_next_frame.triggered.connect(self.workspace.next_frame)
        edit_menu.addAction(self.action_next_frame)

        # テストメニュー
        test_menu = menubar.addMenu("&Test")

        self.action_start_test = QAction("Start Test", self)
        self.action_start_test.setShortcut(QKeySequence("F5"))
        self.action_start_test.triggered.connect(self._on_start_test)
        test_menu.addAction(self.action_start_test)

        self.action_exit_test = QAction("Exit Test", self)
        self.action_exit_test.setShortcut(QKeySequence("Esc"))
        self.action_exit_test.triggered.connect(self._on_exit_test)
        test_menu.addAction(self.action_exit_test)

    def _setup_toolbars(self) -> None:
        """ツールバーをセットアップ"""
        toolbar = self.addToolBar("Main")
        toolbar.setObjectName("MainToolBar")
        toolbar.setMovable(False)
        toolbar.addAction(self.action_open_video)
        toolbar.addAction(self.action_import_package)
        toolbar.addAction(self.action_export_package)
        toolbar.addSeparator()
        toolbar.addAction(self.action_start_test)

    def _setup_statusbar(self) -> None:
        """ステータスバーをセットアップ"""
        statusbar = self.statusBar()
        statusbar.setContentsMargins(8, 4, 8, 4)

        self.notice_message = NoticeMessage(self.workspace.notice_board)
        statusbar.addWidget(self.notice_message, 1)

        self.frame_counter = FrameCounter()
        statusbar.addPermanentWidget(self.frame_counter)

    def _update_ui_state(self) -> None:
        """UI状態を更新"""
        has_project = self.workspace.has_project
        testing = self.test_player is not None
        frame = self.workspace.current_frame

        self.action_open_video.setEnabled(not testing)
        self.action_import_package.setEnabled(not testing)
        self.action_export_package.setEnabled(has_project and not testing)
        self.action_start_test.setEnabled(has_project and not testing)
        self.action_exit_test.setEnabled(testing)
        self.action_delete_box.setEnabled(not testing and self.workspace.selected_box_id is not None)
        self.action_previous_frame.setEnabled(not testing and has_project)
        self.action_next_frame.setEnabled(not testing and has_project)

        self.canvas.set_editing_enabled(not testing)

        current = self.workspace.current_index + 1 if frame is not None else 0
        self.frame_counter.set_frame_info(
            current, len(self.workspace.frames), len(self.workspace.included_frames)
        )

    def _restore_window_state(self) -> None:
        """ウィンドウ状態を復元"""
        geometry = self.settings.value("geometry")
        if geometry:
            self.restoreGeometry(geometry)

        state = self.settings.value("windowState")
        if state:
            self.restoreState(state)

    def _save_window_state(self) -> None:
        """ウィンドウ状態を保存"""
        self.settings.setValue("geometry", self.saveGeometry())
        self.settings.setValue("windowState", self.saveState())

    # === ファイル操作 ===

    def open_video(self, path: Union[str, Path]) -> bool:
        """
        動画からフレームを抽出して読み込む

        失敗はワークスペースが通知ボードに流すので、ここではログのみ。
        """
        progress_dialog = QProgressDialog("Extracting frames...", None, 0, 100, self)
        progress_dialog.setWindowTitle("Open Video")
        progress_dialog.setWindowModality(Qt.WindowModality.WindowModal)
        progress_dialog.setMinimumDuration(0)

        def on_progress(percent: int) -> None:
            progress_dialog.setValue(percent)
            QApplication.processEvents()

        try:
            count = self.workspace.load_video(path, on_progress)
        except (ValueError, IOError) as e:
            logger.warning(f"Video could not be loaded: {e}")
            return False
        finally:
            progress_dialog.close()

        self.workspace.notice_board.info(f"Extracted {count} frames from {Path(path).name}")
        return True

    def import_package(self, path: Union[str, Path]) -> bool:
        """テストパッケージを読み込む"""
        try:
            count = self.workspace.import_package(path)
        except (FileNotFoundError, MalformedPackageError) as e:
            logger.warning(f"Package could not be imported: {e}")
            return False

        self.workspace.notice_board.info(f"Imported {count} frames from {Path(path).name}")
        return True

    def export_package(self, path: Union[str, Path]) -> bool:
        """テスト対象フレームをパッケージとして書き出す"""
        try:
            exported = self.workspace.export_package(path)
        except OSError as e:
            self.workspace.notice_board.error(f"Failed to export package: {e}")
            return False

        if exported:
            self.workspace.notice_board.info(f"Exported test package to {Path(path).name}")
        return exported

    def _on_open_video(self) -> None:
        filepath, _ = QFileDialog.getOpenFileName(self, "Open Video", "", VIDEO_FILE_FILTER)
        if filepath:
            self.open_video(filepath)

    def _on_import_package(self) -> None:
        filepath, _ = QFileDialog.getOpenFileName(self, "Import Package", "", PACKAGE_FILE_FILTER)
        if filepath:
            self.import_package(filepath)

    def _on_export_package(self) -> None:
        filepath, _ = QFileDialog.getSaveFileName(
            self, "Export Package", self.package_settings.default_archive_name, PACKAGE_FILE_FILTER
        )
        if filepath:
            self.export_package(filepath)

    def _on_delete_box(self) -> None:
        box_id = self.workspace.selected_box_id
        if box_id is not None:
            self.workspace.delete_box(box_id)

    # === テスト ===

    def start_test(self) -> bool:
        """テスト対象フレームでテストを開始"""
        if self.test_player is not None:
            return False

        session = self.workspace.start_test(qt_scheduler)
        if session is None:
            return False

        self.test_player = TestPlayerWidget(session)
        self.test_player.exit_requested.connect(self._on_exit_test)
        self.stack.addWidget(self.test_player)
        self.stack.setCurrentWidget(self.test_player)
        self._update_ui_state()
        logger.info("Switched to test mode")
        return True

    def exit_test(self) -> None:
        """テストを終了してオーサリング画面に戻る"""
        if self.test_player is None:
            return

        player = self.test_player
        self.test_player = None
        self.stack.setCurrentWidget(self.editor_page)
        self.stack.removeWidget(player)
        player.deleteLater()

        self.workspace.exit_test()
        self._update_ui_state()
        logger.info("Returned to authoring mode")

    def _on_start_test(self) -> None:
        self.start_test()

    def _on_exit_test(self) -> None:
        self.exit_test()

    def closeEvent(self, event: QCloseEvent) -> None:
        """ウィンドウクローズイベント"""
        self.exit_test()
        self._save_window_state()
        self.canvas.close()
        super().closeEvent(event)
