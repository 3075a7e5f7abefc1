# core/exceptions.py

class LadderSynthError(Exception):
    """Base exception for ladder synthesis errors."""
    pass

class InvalidArgumentError(LadderSynthError, ValueError):
    """Raised when a constructor or operation receives an argument outside its domain."""
    pass

class ConfigError(LadderSynthError):
    """Raised when a design file cannot be read or fails validation."""
    pass
