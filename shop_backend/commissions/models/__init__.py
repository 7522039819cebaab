from .commission import Commission

__all__ = ["Commission"]
