from .seerr import Seerr

__all__ = ["Seerr"]
