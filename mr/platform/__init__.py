"""Platform helpers."""

from .files import atomic_write_text
from .paths import clear_caches, home, is_windows, user_config_dir

__all__ = [
    "atomic_write_text",
    "clear_caches",
    "home",
    "is_windows",
    "user_config_dir",
]
