"""Kiosk screen components"""

import tkinter as tk
from tkinter import ttk
from typing import Dict, Optional, Sequence

from PIL import Image, ImageTk

from core.models import DisplaySnapshot, Phase, WorkOrder
from core.stats import ShiftTotals
from .base_ui import BaseUIComponent, StyleManager, UIUtils


def _action_button(parent: tk.Widget, text: str, color: str, command) -> tk.Button:
    return tk.Button(parent, text=text, command=command, bg=color, fg='white',
                     activebackground=color, disabledforeground='white', relief='flat',
                     font=('Segoe UI', 16, 'bold'), padx=12, pady=12)


class ScannerInputComponent(BaseUIComponent):
    """Manual code entry and camera scan controls.

    Callbacks: 'submit' (text), 'camera' (), 'logout' ().
    """

    def __init__(self, parent: tk.Widget):
        super().__init__(parent)
        self.entry: Optional[tk.Entry] = None
        self.operator_label: Optional[ttk.Label] = None
        self.login_frame: Optional[ttk.Frame] = None
        self.logout_button: Optional[tk.Button] = None

    def create_widgets(self):
        self.frame = ttk.Frame(self.parent, style='Card.TFrame', padding=12)

        header = ttk.Frame(self.frame, style='Card.TFrame')
        header.pack(fill="x")
        ttk.Label(header, text="1) Operatör", style='Header.TLabel').pack(side="left")
        self.logout_button = tk.Button(header, text="Çıkış", relief='groove',
                                       command=lambda: self.trigger_callback('logout'))

        self.login_frame = ttk.Frame(self.frame, style='Card.TFrame')
        ttk.Label(self.login_frame, text="RFID kartı okut. (Okuyucu klavye gibi yazıp Enter gönderir.)",
                  style='Card.TLabel').pack(anchor="w", pady=(8, 8))
        row = ttk.Frame(self.login_frame, style='Card.TFrame')
        row.pack(fill="x")
        self.entry = tk.Entry(row, font=('Segoe UI', 16))
        self.entry.pack(side="left", fill="x", expand=True, ipady=8)
        self.entry.bind('<Return>', self._on_submit)
        _action_button(row, "Giriş", StyleManager.COLOR_TEXT, self._on_submit).pack(side="left", padx=(8, 0))
        _action_button(row, "Kamera", StyleManager.COLOR_PRIMARY,
                       lambda: self.trigger_callback('camera')).pack(side="left", padx=(8, 0))

        self.operator_label = ttk.Label(self.frame, text="", style='Card.TLabel')

    def setup_layout(self):
        self.frame.pack(fill="x", pady=(0, 12))
        self.login_frame.pack(fill="x")

    def _on_submit(self, event=None):
        text = self.entry.get()
        self.entry.delete(0, 'end')
        self.trigger_callback('submit', text)
        # Keep the event away from the global key stream binding
        return "break"

    def update(self, snapshot: DisplaySnapshot):
        if snapshot.phase == Phase.IDLE:
            self.operator_label.pack_forget()
            self.logout_button.pack_forget()
            self.login_frame.pack(fill="x")
        else:
            self.login_frame.pack_forget()
            self.operator_label.config(text=f"Operatör: {snapshot.operator_name}")
            self.operator_label.pack(anchor="w", pady=(8, 0))
            self.logout_button.pack(side="right")


def frame_to_image(frame, width: int) -> Image.Image:
    """Convert an OpenCV BGR frame to an RGB image scaled to width."""
    blue, green, red = Image.fromarray(frame).split()
    image = Image.merge("RGB", (red, green, blue))
    height = max(1, round(width * image.height / image.width))
    return image.resize((width, height), Image.Resampling.BILINEAR)


class CameraPreviewComponent(BaseUIComponent):
    """Shows the frames sampled by the visual code capture"""

    def __init__(self, parent: tk.Widget, width: int = 320):
        super().__init__(parent)
        self.width = width
        self.label: Optional[ttk.Label] = None
        self._photo = None

    def create_widgets(self):
        self.frame = ttk.Frame(self.parent, style='Card.TFrame')
        self.label = ttk.Label(self.frame, style='Card.TLabel')
        self.label.pack()

    def setup_layout(self):
        self.frame.pack(fill="x")

    def show_frame(self, frame):
        """Render a BGR frame array."""
        self._photo = ImageTk.PhotoImage(frame_to_image(frame, self.width))
        self.label.config(image=self._photo)

    def clear(self):
        self._photo = None
        self.label.config(image='')


class WorkOrderListComponent(BaseUIComponent):
    """Selectable work orders; callbacks: 'select' (order), 'start' ()."""

    def __init__(self, parent: tk.Widget, work_orders: Sequence[WorkOrder]):
        super().__init__(parent)
        self.work_orders = list(work_orders)
        self.buttons: Dict[str, tk.Button] = {}
        self.start_button: Optional[tk.Button] = None

    def create_widgets(self):
        self.frame = ttk.Frame(self.parent, style='Card.TFrame', padding=12)
        ttk.Label(self.frame, text="2) İş Emri Seç", style='Header.TLabel').pack(anchor="w")
        for order in self.work_orders:
            button = tk.Button(self.frame, text=f"{order.wo} — {order.model}\n{order.description}",
                               justify='left', anchor='w', relief='solid', bd=1, bg='white',
                               font=('Segoe UI', 13), padx=12, pady=8,
                               command=lambda o=order: self.trigger_callback('select', o))
            self.buttons[order.id] = button
        self.start_button = _action_button(self.frame, "▶ Başlat", StyleManager.COLOR_SUCCESS,
                                           lambda: self.trigger_callback('start'))

    def setup_layout(self):
        self.frame.pack(fill="x")
        for button in self.buttons.values():
            button.pack(fill="x", pady=(8, 0))
        self.start_button.pack(fill="x", pady=(14, 0))

    def update(self, can_pick: bool, can_start: bool, selected: Optional[WorkOrder]):
        for order_id, button in self.buttons.items():
            UIUtils.set_enabled(button, can_pick)
            is_selected = selected is not None and selected.id == order_id
            button.config(bd=3 if is_selected else 1,
                          highlightbackground=StyleManager.COLOR_PRIMARY if is_selected else 'white',
                          bg='white' if can_pick else StyleManager.COLOR_STAT_BG)
        UIUtils.set_enabled(self.start_button, can_start)
        self.start_button.config(bg=StyleManager.COLOR_SUCCESS if can_start else StyleManager.COLOR_DISABLED)


class _StatCard:
    def __init__(self, parent: tk.Widget, label: str):
        self.frame = ttk.Frame(parent, style='Stat.TFrame', padding=12)
        ttk.Label(self.frame, text=label, style='StatLabel.TLabel').pack(anchor="w")
        self.value = ttk.Label(self.frame, text="-", style='StatValue.TLabel')
        self.value.pack(anchor="w")

    def set(self, text: str):
        self.value.config(text=text)


class ProductionPanelComponent(BaseUIComponent):
    """Elapsed time, produced count, PPH and the production actions.

    Callbacks: 'piece', 'break', 'fault', 'resume', 'finish'.
    """

    def __init__(self, parent: tk.Widget):
        super().__init__(parent)
        self.active_label: Optional[ttk.Label] = None
        self.placeholder: Optional[ttk.Label] = None
        self.body: Optional[ttk.Frame] = None
        self.cards: Dict[str, _StatCard] = {}
        self.buttons: Dict[str, tk.Button] = {}

    def create_widgets(self):
        self.frame = ttk.Frame(self.parent, style='Card.TFrame', padding=12)
        ttk.Label(self.frame, text="3) Üretim / Durum", style='Header.TLabel').pack(anchor="w")
        self.placeholder = ttk.Label(self.frame, text="Başlatınca burada üretim butonları açılacak.",
                                     style='Card.TLabel')
        self.body = ttk.Frame(self.frame, style='Card.TFrame')
        self.active_label = ttk.Label(self.body, text="", style='Card.TLabel')
        self.active_label.pack(anchor="w", pady=(8, 8))

        stats = ttk.Frame(self.body, style='Card.TFrame')
        stats.pack(fill="x")
        for col, (key, label) in enumerate((('elapsed', "Süre"), ('produced', "Üretilen"), ('pph', "PPH"))):
            card = _StatCard(stats, label)
            card.frame.grid(row=0, column=col, sticky="nsew", padx=4)
            stats.grid_columnconfigure(col, weight=1)
            self.cards[key] = card

        actions = ttk.Frame(self.body, style='Card.TFrame')
        actions.pack(fill="x", pady=(12, 0))
        specs = (
            ('piece', "➕ Parça (+1)", StyleManager.COLOR_TEXT),
            ('break', "⏸ Mola", StyleManager.COLOR_WARNING),
            ('resume', "▶ Devam", StyleManager.COLOR_PRIMARY),
            ('fault', "⚠ Arıza", StyleManager.COLOR_DANGER),
            ('finish', "⏹ İş Emri Bitir", StyleManager.COLOR_SUCCESS),
        )
        for key, text, color in specs:
            self.buttons[key] = _action_button(actions, text, color,
                                               lambda k=key: self.trigger_callback(k))
        actions.grid_columnconfigure(0, weight=1)
        actions.grid_columnconfigure(1, weight=1)

    def setup_layout(self):
        self.frame.pack(fill="x", pady=(0, 12))
        self.placeholder.pack(anchor="w", pady=(8, 0))

    def update(self, snapshot: DisplaySnapshot):
        if snapshot.phase not in (Phase.RUNNING, Phase.PAUSED):
            self.body.pack_forget()
            self.placeholder.pack(anchor="w", pady=(8, 0))
            return
        self.placeholder.pack_forget()
        self.body.pack(fill="x")

        order = snapshot.work_order
        self.active_label.config(
            text=f"Aktif WO: {order.wo} — {order.model} / {order.operation} / {order.color} / {order.size}")
        self.cards['elapsed'].set(snapshot.elapsed_text)
        self.cards['produced'].set(str(snapshot.produced))
        self.cards['pph'].set(str(snapshot.pph))

        running = snapshot.phase == Phase.RUNNING
        for button in self.buttons.values():
            button.grid_forget()
        self.buttons['piece'].grid(row=0, column=0, sticky="ew", padx=4, pady=4)
        toggle = self.buttons['break'] if running else self.buttons['resume']
        toggle.grid(row=0, column=1, sticky="ew", padx=4, pady=4)
        self.buttons['fault'].grid(row=1, column=0, sticky="ew", padx=4, pady=4)
        self.buttons['finish'].grid(row=1, column=1, sticky="ew", padx=4, pady=4)
        for key, color in (('piece', StyleManager.COLOR_TEXT), ('fault', StyleManager.COLOR_DANGER)):
            UIUtils.set_enabled(self.buttons[key], running)
            self.buttons[key].config(bg=color if running else StyleManager.COLOR_DISABLED)


class ShiftTotalsComponent(BaseUIComponent):
    """Today's totals of this kiosk"""

    def __init__(self, parent: tk.Widget):
        super().__init__(parent)
        self.cards: Dict[str, _StatCard] = {}

    def create_widgets(self):
        self.frame = ttk.Frame(self.parent, style='Card.TFrame', padding=12)
        ttk.Label(self.frame, text="4) Günlük", style='Header.TLabel').pack(anchor="w")
        row = ttk.Frame(self.frame, style='Card.TFrame')
        row.pack(fill="x", pady=(8, 0))
        for col, (key, label) in enumerate((('produced', "Bugün Toplam"), ('break', "Mola"), ('fault', "Arıza"))):
            card = _StatCard(row, label)
            card.frame.grid(row=0, column=col, sticky="nsew", padx=4)
            row.grid_columnconfigure(col, weight=1)
            self.cards[key] = card

    def setup_layout(self):
        self.frame.pack(fill="x")

    def update(self, totals: ShiftTotals):
        self.cards['produced'].set(str(totals.produced))
        self.cards['break'].set(f"{totals.break_minutes} dk")
        self.cards['fault'].set(f"{totals.fault_minutes} dk")
