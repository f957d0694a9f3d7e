"""Registry module - Selectable prefecture catalog."""

from .prefecture_registry import PrefectureRegistry, registry

__all__ = ['PrefectureRegistry', 'registry']
