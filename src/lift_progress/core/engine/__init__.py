from .service import ProgressionEngine

__all__ = ["ProgressionEngine"]
