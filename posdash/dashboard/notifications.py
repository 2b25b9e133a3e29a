"""
Toast notifications for the dashboard pages, carried by django.contrib.messages.
"""
from dataclasses import dataclass

from django.contrib import messages

SUCCESS = 'success'
ERROR = 'error'
WARNING = 'warning'
INFO = 'info'

LEVELS = {
    SUCCESS: messages.SUCCESS,
    ERROR: messages.ERROR,
    WARNING: messages.WARNING,
    INFO: messages.INFO,
}


@dataclass(frozen=True)
class Toast:
    level: str
    text: str


def push(request, toasts):
    """Queue toasts for the next rendered page"""
    for toast in toasts:
        messages.add_message(request, LEVELS[toast.level], toast.text)


class ToastCollector:
    """Mixin for controllers that report their outcome as toasts"""

    def __init__(self):
        self.toasts = []

    def toast(self, level, text):
        self.toasts.append(Toast(level, text))

    def drain(self):
        toasts, self.toasts = self.toasts, []
        return toasts
