"""Base UI component and utility classes"""

import tkinter as tk
from tkinter import ttk, messagebox
from typing import Optional, Callable, Dict
from abc import ABC, abstractmethod


class BaseUIComponent(ABC):
    """A card on the kiosk screen.

    Subclasses create their widgets and lay them out in build(); user
    actions leave the component only through named callbacks.
    """

    def __init__(self, parent: tk.Widget):
        self.parent = parent
        self.frame: Optional[ttk.Frame] = None
        self.callbacks: Dict[str, Callable] = {}

    @abstractmethod
    def create_widgets(self):
        """Create the widgets."""

    @abstractmethod
    def setup_layout(self):
        """Place the widgets."""

    def build(self):
        self.create_widgets()
        self.setup_layout()
        return self

    def set_callback(self, event_name: str, callback: Callable):
        self.callbacks[event_name] = callback

    def trigger_callback(self, event_name: str, *args, **kwargs):
        callback = self.callbacks.get(event_name)
        if callback is not None:
            return callback(*args, **kwargs)
        return None


class UIUtils:
    """Dialog and widget state helpers"""

    @staticmethod
    def show_info_message(title: str, message: str, parent: Optional[tk.Widget] = None):
        """Blocking information dialog."""
        messagebox.showinfo(title, message, parent=parent)

    @staticmethod
    def confirm(title: str, message: str, parent: Optional[tk.Widget] = None) -> bool:
        return messagebox.askokcancel(title, message, parent=parent)

    @staticmethod
    def set_enabled(widget: tk.Widget, enabled: bool):
        widget.configure(state=tk.NORMAL if enabled else tk.DISABLED)


class StyleManager:
    """Kiosk colors and ttk styles"""

    COLOR_BG = "#F6F7FB"
    COLOR_CARD = "#FFFFFF"
    COLOR_STAT_BG = "#F3F4F6"
    COLOR_TEXT = "#111827"
    COLOR_MUTED = "#374151"
    COLOR_PRIMARY = "#2563EB"
    COLOR_SUCCESS = "#16A34A"
    COLOR_WARNING = "#F59E0B"
    COLOR_DANGER = "#EF4444"
    COLOR_DISABLED = "#9CA3AF"

    # Status bar text color per message level
    LEVEL_COLORS = {
        'info': COLOR_MUTED,
        'success': COLOR_SUCCESS,
        'warning': COLOR_WARNING,
        'error': COLOR_DANGER,
    }

    def __init__(self, font_family: str = 'Segoe UI'):
        self.font_family = font_family
        self._style = ttk.Style()

    def setup_default_styles(self):
        card_font = (self.font_family, 14)
        self._style.configure('TFrame', background=self.COLOR_BG)
        self._style.configure('Card.TFrame', background=self.COLOR_CARD)
        self._style.configure('Stat.TFrame', background=self.COLOR_STAT_BG)
        self._style.configure('Header.TLabel', background=self.COLOR_CARD, foreground=self.COLOR_TEXT,
                              font=(self.font_family, 18, 'bold'))
        self._style.configure('Card.TLabel', background=self.COLOR_CARD, foreground=self.COLOR_MUTED,
                              font=card_font)
        self._style.configure('StatLabel.TLabel', background=self.COLOR_STAT_BG,
                              foreground=self.COLOR_MUTED, font=(self.font_family, 11))
        self._style.configure('StatValue.TLabel', background=self.COLOR_STAT_BG,
                              foreground=self.COLOR_TEXT, font=(self.font_family, 22, 'bold'))
