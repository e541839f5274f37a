from .http import CommandRunner

__all__ = ["CommandRunner"]
