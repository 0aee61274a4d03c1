"""Error types for notification side effects."""


class NonCriticalSideEffectError(Exception):
    """Raised by optional side effects such as sound playback or push delivery.

    The notification center logs and ignores these failures.
    """

    pass


__all__ = ["NonCriticalSideEffectError"]
