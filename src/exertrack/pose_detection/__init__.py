from .base_detector import BasePoseDetector

__all__ = ['BasePoseDetector']
