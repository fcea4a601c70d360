"""deadair — find and cut dead air in recorded demo videos."""

__version__ = "0.1.0"
