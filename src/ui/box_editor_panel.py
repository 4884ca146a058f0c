#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ボックス編集パネル

選択中ボックスのラベル・期待値・クリック順の編集と、
ボックスの追加 / 削除、フレームのテスト対象切り替えを提供。
"""
import logging
from typing import Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGroupBox, QFormLayout,
    QPushButton, QLabel, QLineEdit, QSpinBox, QCheckBox
)

from core.authoring_workspace import AuthoringWorkspace
from domain.dto.box_dto import BoxType, HotspotDTO, InputFieldDTO

logger = logging.getLogger(__name__)


class FrameNavigatorWidget(QWidget):
    """フレーム移動とテスト対象の切り替え"""

    def __init__(self, workspace: AuthoringWorkspace, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._workspace = workspace

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.prev_button = QPushButton("< Prev")
        self.prev_button.clicked.connect(workspace.previous_frame)
        layout.addWidget(self.prev_button)

        self.frame_label = QLabel()
        layout.addWidget(self.frame_label)

        self.next_button = QPushButton("Next >")
        self.next_button.clicked.connect(workspace.next_frame)
        layout.addWidget(self.next_button)

        layout.addStretch()

        self.include_checkbox = QCheckBox("Include in test")
        self.include_checkbox.toggled.connect(workspace.set_frame_included)
        layout.addWidget(self.include_checkbox)

        workspace.add_listener(self.refresh)
        self.refresh()

    def refresh(self) -> None:
        """ワークスペースの状態を反映"""
        frames = self._workspace.frames
        frame = self._workspace.current_frame
        index = self._workspace.current_index

        if frame is None:
            self.frame_label.setText("No frames")
        else:
            self.frame_label.setText(f"Frame {index + 1} / {len(frames)}")

        self.prev_button.setEnabled(frame is not None and index > 0)
        self.next_button.setEnabled(frame is not None and index < len(frames) - 1)

        self.include_checkbox.blockSignals(True)
        self.include_checkbox.setEnabled(frame is not None)
        self.include_checkbox.setChecked(frame is not None and frame.include_in_test)
        self.include_checkbox.blockSignals(False)


class BoxEditorPanel(QWidget):
    """
    ボックス編集パネル

    編集はすべてワークスペース経由で行い、表示はワークスペースの
    変更通知で更新する。
    """

    # シグナル
    box_deleted = pyqtSignal(str)  # ボックスID

    def __init__(self, workspace: AuthoringWorkspace, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._workspace = workspace
        self._setup_ui()

        workspace.add_listener(self.refresh)
        self.refresh()

    def _setup_ui(self) -> None:
        """UIをセットアップ"""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(5, 5, 5, 5)

        title_label = QLabel("Boxes")
        title_label.setStyleSheet("font-weight: bold; font-size: 14px;")
        layout.addWidget(title_label)

        # 追加ボタン
        add_layout = QHBoxLayout()
        self.add_hotspot_button = QPushButton("Add Hotspot")
        self.add_hotspot_button.clicked.connect(lambda: self._workspace.add_box(BoxType.HOTSPOT))
        add_layout.addWidget(self.add_hotspot_button)

        self.add_input_button = QPushButton("Add Input")
        self.add_input_button.clicked.connect(lambda: self._workspace.add_box(BoxType.INPUT))
        add_layout.addWidget(self.add_input_button)
        layout.addLayout(add_layout)

        # 選択中ボックス
        self.box_group = QGroupBox("Selected box")
        form = QFormLayout(self.box_group)

        self.type_label = QLabel()
        form.addRow("Type:", self.type_label)

        self.label_edit = QLineEdit()
        self.label_edit.editingFinished.connect(self._on_label_edited)
        form.addRow("Label:", self.label_edit)

        self.order_spinbox = QSpinBox()
        self.order_spinbox.setRange(1, 999)
        self.order_spinbox.valueChanged.connect(self._on_order_changed)
        form.addRow("Click order:", self.order_spinbox)

        self.expected_edit = QLineEdit()
        self.expected_edit.setPlaceholderText("Expected answer")
        self.expected_edit.editingFinished.connect(self._on_expected_edited)
        form.addRow("Expected:", self.expected_edit)

        self.delete_button = QPushButton("Delete box")
        self.delete_button.clicked.connect(self._on_delete_clicked)
        form.addRow(self.delete_button)

        layout.addWidget(self.box_group)
        layout.addStretch()

    def refresh(self) -> None:
        """選択中ボックスの内容を表示"""
        frame = self._workspace.current_frame
        can_add = frame is not None and frame.include_in_test
        self.add_hotspot_button.setEnabled(can_add)
        self.add_input_button.setEnabled(can_add)

        box = self._workspace.selected_box
        self.box_group.setEnabled(box is not None)

        for widget in (self.label_edit, self.order_spinbox, self.expected_edit):
            widget.blockSignals(True)

        if box is None:
            self.type_label.setText("-")
            self.label_edit.clear()
            self.expected_edit.clear()
            self.order_spinbox.setValue(1)
        else:
            self.type_label.setText(box.box_type.value)
            if not self.label_edit.hasFocus():
                self.label_edit.setText(box.label)
            if isinstance(box, HotspotDTO):
                self.order_spinbox.setValue(box.order)
            if isinstance(box, InputFieldDTO) and not self.expected_edit.hasFocus():
                self.expected_edit.setText(box.expected)

        self.order_spinbox.setEnabled(isinstance(box, HotspotDTO))
        self.expected_edit.setEnabled(isinstance(box, InputFieldDTO))

        for widget in (self.label_edit, self.order_spinbox, self.expected_edit):
            widget.blockSignals(False)

    def _on_label_edited(self) -> None:
        box = self._workspace.selected_box
        if box is not None and self.label_edit.text() != box.label:
            self._workspace.update_box(box.id, label=self.label_edit.text())

    def _on_order_changed(self, value: int) -> None:
        box = self._workspace.selected_box
        if isinstance(box, HotspotDTO) and value != box.order:
            self._workspace.update_box(box.id, order=value)

    def _on_expected_edited(self) -> None:
        box = self._workspace.selected_box
        if isinstance(box, InputFieldDTO) and self.expected_edit.text() != box.expected:
            self._workspace.update_box(box.id, expected=self.expected_edit.text())

    def _on_delete_clicked(self) -> None:
        box_id = self._workspace.selected_box_id
        if box_id is not None and self._workspace.delete_box(box_id):
            self.box_deleted.emit(box_id)
