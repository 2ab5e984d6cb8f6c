"""Notifier registry — the notification dispatch collaborator.

The composition root (``app.py``) or a test injects the adapter with
``configure_notifier``; command handlers resolve it through ``get_notifier``.
Falls back to the log-only adapter when nothing was configured.
"""

from notifications.channel.notifier_port import NotifierPort

_notifier: NotifierPort | None = None


def configure_notifier(notifier: NotifierPort) -> NotifierPort:
    """Install the adapter used for every subsequent dispatch."""
    global _notifier
    _notifier = notifier
    return notifier


def get_notifier() -> NotifierPort:
    global _notifier
    if _notifier is None:
        from notifications.channel.log_notifier import LogNotifier

        _notifier = LogNotifier()
    return _notifier


def reset_notifier():
    """Drop the configured adapter (useful for testing)."""
    global _notifier
    _notifier = None
