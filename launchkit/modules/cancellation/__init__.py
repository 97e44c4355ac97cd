"""Cooperative cancellation for long running startup work."""

from .token import CancellationSource, CancellationToken, CancelledError, cancellable_sleep

__all__ = ['CancellationSource', 'CancellationToken', 'CancelledError', 'cancellable_sleep']
