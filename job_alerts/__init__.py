"""Smart job alerts: multi-signal job matching and alert e-mail dispatch."""

__version__ = "1.0.0"
