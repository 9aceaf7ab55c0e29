# common/api_error/config_error.py
class ConfigurationError(RuntimeError):
    """
    Raised when the clinic service configuration is missing or invalid.
    Always fatal at startup.
    """


__all__ = ["ConfigurationError"]
