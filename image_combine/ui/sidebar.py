"""Боковая панель: список исходных файлов, лимит размера, склейка и сохранение.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

import customtkinter as ctk

from image_combine.models.image_model import MergeReport


def _rgb_to_hex(rgb: Tuple[int, int, int]) -> str:
    r, g, b = rgb[:3]
    return f"#{r:02X}{g:02X}{b:02X}"


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файлы, параметры, результат, курсор."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_add_files: Optional[Callable[[], None]] = None
        self.on_clear_files: Optional[Callable[[], None]] = None
        self.on_merge: Optional[Callable[[], None]] = None
        self.on_save: Optional[Callable[[], None]] = None

        # Files section
        self._title = ctk.CTkLabel(self, text="Изображения", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._add_btn = ctk.CTkButton(self, text="Добавить…", command=self._emit_add_files)
        self._add_btn.grid(row=1, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._clear_btn = ctk.CTkButton(self, text="Очистить список", command=self._emit_clear_files)
        self._clear_btn.grid(row=2, column=0, padx=8, pady=(0, 4), sticky="ew")

        # order in this list is the stacking order, top to bottom
        self._files_box = ctk.CTkTextbox(self, height=160, wrap="none")
        self._files_box.grid(row=3, column=0, padx=8, pady=(0, 12), sticky="nsew")
        self._files_box.configure(state="disabled")
        self.grid_rowconfigure(3, weight=1)

        # Parameters
        self._params_title = ctk.CTkLabel(self, text="Параметры", font=ctk.CTkFont(size=16, weight="bold"))
        self._params_title.grid(row=4, column=0, padx=8, pady=(8, 4), sticky="w")

        self._budget_val = ctk.StringVar(value="")
        self._budget_label = ctk.CTkLabel(self, text="Макс. размер, КБ (пусто — без лимита):")
        self._budget_entry = ctk.CTkEntry(self, textvariable=self._budget_val, width=120)
        self._budget_label.grid(row=5, column=0, padx=8, pady=(0, 2), sticky="w")
        self._budget_entry.grid(row=6, column=0, padx=8, pady=(0, 8), sticky="w")

        self._merge_btn = ctk.CTkButton(self, text="Склеить", command=self._emit_merge)
        self._merge_btn.grid(row=7, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._save_btn = ctk.CTkButton(self, text="Сохранить JPEG…", command=self._emit_save, state="disabled")
        self._save_btn.grid(row=8, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Result info
        self._info_title = ctk.CTkLabel(self, text="Результат", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=9, column=0, padx=8, pady=(8, 4), sticky="w")

        self._dims_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._quality_val = ctk.StringVar(value="—")

        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_quality = ctk.CTkLabel(self, textvariable=self._quality_val, wraplength=250, anchor="w", justify="left")
        self._info_dims.grid(row=10, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=11, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_quality.grid(row=12, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Cursor section
        self._cursor_title = ctk.CTkLabel(self, text="Курсор", font=ctk.CTkFont(size=16, weight="bold"))
        self._cursor_title.grid(row=13, column=0, padx=8, pady=(8, 4), sticky="w")

        self._cursor_xy_val = ctk.StringVar(value="—")
        self._cursor_rgb_val = ctk.StringVar(value="—")
        self._cursor_xy = ctk.CTkLabel(self, textvariable=self._cursor_xy_val, anchor="w", justify="left")
        self._cursor_rgb = ctk.CTkLabel(self, textvariable=self._cursor_rgb_val, anchor="w", justify="left")
        self._cursor_xy.grid(row=14, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._cursor_rgb.grid(row=15, column=0, padx=8, pady=(0, 8), sticky="ew")

    # ---- Public API ----
    def set_files(self, paths: Sequence[Path]) -> None:
        self._files_box.configure(state="normal")
        self._files_box.delete("1.0", "end")
        for i, path in enumerate(paths, start=1):
            self._files_box.insert("end", f"{i}. {path.name}\n")
        self._files_box.configure(state="disabled")

    def get_max_size_kb(self) -> Optional[int]:
        """Лимит из поля ввода; пустое поле — без лимита.

        Raises:
            ValueError: если введено не целое положительное число.
        """
        raw = self._budget_val.get().strip()
        if not raw:
            return None
        value = int(raw)
        if value <= 0:
            raise ValueError(f"Лимит должен быть положительным: {value}")
        return value

    def set_result_info(self, report: Optional[MergeReport]) -> None:
        if report is None or report.data is None:
            self._dims_val.set("—")
            self._size_val.set("—")
            self._quality_val.set("—")
            self._save_btn.configure(state="disabled")
            return
        self._dims_val.set(f"{report.width} × {report.height} px")
        self._size_val.set(f"{len(report.data) / 1024:.1f} КБ")
        tried = ", ".join(str(q) for q in report.attempts)
        self._quality_val.set(f"Качество {report.quality} (попытки: {tried})")
        self._save_btn.configure(state="normal")

    def update_cursor_info(self, x: Optional[int], y: Optional[int], rgb: Optional[Tuple[int, int, int]]) -> None:
        if x is None or y is None or rgb is None:
            self._cursor_xy_val.set("—")
            self._cursor_rgb_val.set("—")
            return
        self._cursor_xy_val.set(f"x={x}, y={y}")
        self._cursor_rgb_val.set(f"RGB{tuple(rgb[:3])} {_rgb_to_hex(rgb)}")

    # ---- Events ----
    def _emit_add_files(self) -> None:
        if self.on_add_files:
            self.on_add_files()

    def _emit_clear_files(self) -> None:
        if self.on_clear_files:
            self.on_clear_files()

    def _emit_merge(self) -> None:
        if self.on_merge:
            self.on_merge()

    def _emit_save(self) -> None:
        if self.on_save:
            self.on_save()
