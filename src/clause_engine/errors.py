"""
Exceptions raised at the edges of the clause engine.

The engine itself never raises for bad reference data (anomalies become
diagnostics). Only the loading boundary and the configuration layer do.
"""


class ClauseEngineError(Exception):
    """Base class for clause engine errors."""
    pass


class TableLoadError(ClauseEngineError):
    """Raised when a reference table cannot be read into rows."""
    pass


class ConfigError(ClauseEngineError):
    """Raised when a configuration file is invalid."""
    pass
