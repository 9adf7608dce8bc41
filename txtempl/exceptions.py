class TxtTemplError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(TxtTemplError):
    # errors related to configuration and seed variables.
    pass

class TemplateError(TxtTemplError):
    # errors while loading a template source.
    pass

class OutputError(TxtTemplError):
    # errors during output operations.
    pass
