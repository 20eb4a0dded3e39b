class MvBrowserError(Exception):
    """Base exception for all mv_browser errors"""
    pass

class ConfigError(MvBrowserError):
    """Invalid or inconsistent browser.json or attribute mapping"""
    pass

class DatasetSchemaError(MvBrowserError):
    """
    Tabular input doesn't match what Dataset expects
    missing mapped columns, unreadable file, etc
    """
    pass

class PackingError(MvBrowserError):
    """Enclosing circle could not be resolved for a set of packed circles"""
    pass
