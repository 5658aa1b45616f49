"""worktime: per-day presence bitmaps from session begin/end markers."""

__version__ = "0.1.0"
