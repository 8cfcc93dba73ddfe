from __future__ import annotations


class IconGridError(ValueError):
    pass


class MovedFromError(IconGridError):
    pass
