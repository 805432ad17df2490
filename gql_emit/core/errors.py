"""Exceptions raised by the code generator."""


class CodegenError(Exception):
    """Base exception for generation failures."""


class ConfigError(CodegenError, ValueError):
    """Exception raised for configuration-related errors.

    Configuration errors are fatal: the generation run for the output unit
    is aborted and no partial output is produced.
    """
