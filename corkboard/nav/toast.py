"""
FILE: corkboard/nav/toast.py
PURPOSE: Short-lived notifications with a fade in / hold / fade out animation
EXPORTS:
  - ToastType (Enum)
  - Toast
  - ToastManager
NOTES:
  - Toasts are advisory; nothing in the navigation core reads them back
  - Colour is recomputed on every tick from wall-clock time
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..core.constants import TOAST_DEFAULT_DURATION, TOAST_FADE_IN_TIME, TOAST_FADE_OUT_TIME

RGB = Tuple[int, int, int]

# Background the toast fades from/to
BACKGROUND: RGB = (0, 0, 0)


class ToastType(Enum):
    ERROR = ("Error", (255, 0, 0))
    WARNING = ("Warning", (255, 255, 0))
    INFO = ("Info", (0, 255, 255))
    LOADING = ("Loading", (0, 255, 0))

    def __init__(self, label: str, color: RGB):
        self.label = label
        self.color = color

    def __str__(self) -> str:
        return self.label


def lerp(start: RGB, end: RGB, t: float) -> RGB:
    t = min(max(t, 0.0), 1.0)
    return tuple(int(a + (b - a) * t) for a, b in zip(start, end))


@dataclass
class Toast:
    message: str
    toast_type: ToastType
    start_time: float
    duration: float  # seconds
    title: str = ""
    color: RGB = field(default=BACKGROUND)

    def __post_init__(self):
        if not self.title:
            self.title = self.toast_type.label

    def elapsed_ms(self, now: float) -> float:
        return (now - self.start_time) * 1000

    def expired(self, now: float) -> bool:
        return now - self.start_time > self.duration

    def update_color(self, now: float) -> RGB:
        elapsed = self.elapsed_ms(now)
        total = self.duration * 1000
        target = self.toast_type.color
        if elapsed < TOAST_FADE_IN_TIME:
            self.color = lerp(BACKGROUND, target, elapsed / TOAST_FADE_IN_TIME)
        elif elapsed < total - TOAST_FADE_OUT_TIME:
            self.color = target
        else:
            fade = (elapsed - (total - TOAST_FADE_OUT_TIME)) / TOAST_FADE_OUT_TIME
            self.color = lerp(target, BACKGROUND, fade)
        return self.color


class ToastManager:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.toasts: List[Toast] = []

    def add(
        self,
        message: str,
        toast_type: ToastType = ToastType.INFO,
        duration_ms: Optional[int] = None,
        title: str = "",
    ) -> Toast:
        toast = Toast(
            message=message,
            toast_type=toast_type,
            start_time=self._clock(),
            duration=(duration_ms or TOAST_DEFAULT_DURATION) / 1000,
            title=title,
        )
        self.toasts.append(toast)
        return toast

    def info(self, message: str, **kwargs) -> Toast:
        return self.add(message, ToastType.INFO, **kwargs)

    def warning(self, message: str, **kwargs) -> Toast:
        return self.add(message, ToastType.WARNING, **kwargs)

    def error(self, message: str, **kwargs) -> Toast:
        return self.add(message, ToastType.ERROR, **kwargs)

    def loading(self, message: str, **kwargs) -> Toast:
        return self.add(message, ToastType.LOADING, **kwargs)

    def tick(self, now: Optional[float] = None) -> List[Toast]:
        """Drop expired toasts and refresh the colour of the rest."""
        now = self._clock() if now is None else now
        self.toasts = [t for t in self.toasts if not t.expired(now)]
        for toast in self.toasts:
            toast.update_color(now)
        return self.toasts
