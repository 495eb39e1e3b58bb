"""Контроллер приложения: оркестрация UI и сервиса склейки.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики обработки изображений).
- DIP: зависит от `MergeService` как от роли; конкретные кодировщики инкапсулированы в нём.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from tkinter import TclError, filedialog
from typing import List, Optional, Tuple

import customtkinter as ctk
from PIL import Image

from image_combine.errors import MergeError
from image_combine.models.image_model import MergeReport
from image_combine.services.image_service import load_file, save_result
from image_combine.services.merge_service import MergeService
from image_combine.ui.bottom_bar import BottomBar
from image_combine.ui.image_viewer import ImageViewer
from image_combine.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Ведение упорядоченного списка исходных файлов (порядок = порядок склейки).
    - Запуск склейки через `MergeService` и показ результата.
    - Сохранение результата и синхронизация зума.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk

    _merge_service: MergeService = field(default_factory=MergeService)
    _paths: List[Path] = field(default_factory=list)
    _report: Optional[MergeReport] = None

    def bind_events(self) -> None:
        self.sidebar.on_add_files = self._handle_add_files
        self.sidebar.on_clear_files = self._handle_clear_files
        self.sidebar.on_merge = self._handle_merge
        self.sidebar.on_save = self._handle_save

        self.viewer.on_cursor_move = self._handle_cursor_move
        self.viewer.on_zoom_change = self._handle_viewer_zoom_changed

        self.bottom.on_zoom_change = self._handle_zoom_change
        self.bottom.on_zoom_preset = self._handle_zoom_change
        self.bottom.on_zoom_fit = self._handle_zoom_fit

    # ---- Handlers ----
    def _handle_add_files(self) -> None:
        try:
            file_paths = filedialog.askopenfilenames(
                title="Выберите изображения",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_paths:
            return
        self._paths.extend(Path(p) for p in file_paths)
        self.sidebar.set_files(self._paths)

    def _handle_clear_files(self) -> None:
        self._paths.clear()
        self._report = None
        self.sidebar.set_files(self._paths)
        self.sidebar.set_result_info(None)
        self.viewer.set_image(None)
        self.bottom.set_status("Список пуст")

    def _handle_merge(self) -> None:
        try:
            max_size_kb = self.sidebar.get_max_size_kb()
        except ValueError:
            self.bottom.set_status("Лимит размера должен быть целым положительным числом")
            return

        blobs = self._read_blobs()
        try:
            self._report = self._merge_service.run(blobs, max_size_kb)
        except MergeError as exc:
            logger.error("Склейка не удалась: %s", exc)
            self._report = None
            self.sidebar.set_result_info(None)
            self.viewer.set_image(None)
            self.bottom.set_status(f"Не удалось склеить: {exc}")
            return

        self.sidebar.set_result_info(self._report)
        self.viewer.set_image(Image.open(io.BytesIO(self._report.data)))
        self._sync_zoom()
        self.bottom.set_status(self._status_text(self._report))

    def _handle_save(self) -> None:
        if self._report is None or self._report.data is None:
            return
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить результат",
                defaultextension=".jpg",
                filetypes=(("JPEG", "*.jpg *.jpeg"),),
            )
        except TclError:
            return
        if not file_path:
            return
        try:
            save_result(file_path, self._report.data)
        except OSError as exc:
            self.bottom.set_status(f"Не удалось сохранить: {exc}")
            return
        self.bottom.set_status(f"Сохранено: {file_path}")

    def _handle_cursor_move(self, x: Optional[int], y: Optional[int], rgb: Optional[Tuple[int, int, int]]) -> None:
        self.sidebar.update_cursor_info(x, y, rgb)

    def _handle_viewer_zoom_changed(self, zoom_percent: int) -> None:
        self.bottom.set_zoom_percent(zoom_percent)

    def _handle_zoom_change(self, zoom_percent: int) -> None:
        self.viewer.set_zoom_percent(zoom_percent)

    def _handle_zoom_fit(self) -> None:
        self.viewer.set_zoom_to_fit()
        self._sync_zoom()

    # ---- Helpers ----
    def _read_blobs(self) -> List[bytes]:
        """Читает файлы; недоступный файл превращается в пустой блоб и отбрасывается при декодировании."""
        blobs: List[bytes] = []
        for path in self._paths:
            try:
                blobs.append(load_file(path))
            except (FileNotFoundError, OSError) as exc:
                logger.warning("%s", exc)
                blobs.append(b"")
        return blobs

    def _sync_zoom(self) -> None:
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())

    @staticmethod
    def _status_text(report: MergeReport) -> str:
        text = f"Готово: {report.width}×{report.height}, {len(report.data) / 1024:.1f} КБ"
        if report.skipped:
            skipped = ", ".join(str(i + 1) for i in report.skipped)
            text += f"; пропущены: {skipped}"
        return text
