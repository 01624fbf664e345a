#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the unlatex library.

Parsing and printing LaTeX never fail on malformed source: unmatched braces,
unknown macros and missing arguments are recorded as degradations on the
parser instead (see :mod:`unlatex.parsers.latex`). The exceptions defined here
cover the remaining error conditions, chiefly invalid configuration rejected
at the API boundary.

Exception Hierarchy
-------------------
- UnlatexError (base exception)

  - ValidationError (parameter/option validation)
    - ConfigurationError (invalid formatting or parsing options)
    - InvalidOptionsError (wrong options class for a parser or printer)

  - SerializationError (malformed AST dump)

  - TransformError (illegal AST mutation during traversal)

  - FileError (file access and I/O for the CLI and ``format_file``)

  - DependencyError (missing optional packages)

"""

from __future__ import annotations

from typing import Any


class UnlatexError(Exception):
    """Base exception class for all unlatex-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(UnlatexError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    parameter_name : str or None
        The name of the problematic parameter
    parameter_value : any
        The value that caused the error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ConfigurationError(ValidationError):
    """Exception raised when formatting or parsing options are invalid.

    Raised eagerly, when an options object or a print context is constructed,
    so that a bad ``print_width`` or ``tab_width`` never reaches the printer.

    Examples
    --------
    >>> LatexFormatOptions(print_width=0)
    Traceback (most recent call last):
    ...
    ConfigurationError: print_width must be a positive integer, got 0

    """


class InvalidOptionsError(ValidationError):
    """Exception raised when an incorrect options class is provided.

    Parameters
    ----------
    component_name : str
        Name of the parser or printer that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        component_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{component_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(message, parameter_name="options", parameter_value=received_type)
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class SerializationError(UnlatexError):
    """Exception raised when a serialized AST cannot be converted back to nodes.

    Parameters
    ----------
    message : str
        Description of the failure
    node_type : str, optional
        The ``node_type`` value of the offending dictionary, when known
    original_error : Exception, optional
        The underlying exception (for example a ``json.JSONDecodeError``)

    """

    def __init__(self, message: str, node_type: str | None = None, original_error: Exception | None = None):
        """Initialize the serialization error."""
        super().__init__(message, original_error)
        self.node_type = node_type


class TransformError(UnlatexError):
    """Exception raised when an AST traversal requests an illegal mutation.

    Parameters
    ----------
    message : str
        Description of the transform failure
    transform_name : str, optional
        Name of the visitor that failed
    original_error : Exception, optional
        The underlying exception that caused the transform failure

    """

    def __init__(self, message: str, transform_name: str | None = None, original_error: Exception | None = None):
        """Initialize the transform error."""
        super().__init__(message, original_error)
        self.transform_name = transform_name


class FileError(UnlatexError):
    """Exception raised when a source file cannot be read or written.

    Parameters
    ----------
    message : str
        Description of the failure
    file_path : str, optional
        Path of the file involved
    original_error : Exception, optional
        The underlying ``OSError``

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error."""
        super().__init__(message, original_error)
        self.file_path = file_path


class DependencyError(UnlatexError):
    """Exception raised when an optional dependency is not available.

    Parameters
    ----------
    feature_name : str
        Name of the feature requiring the dependency
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(self, feature_name: str, missing_packages: list[tuple[str, str]], message: str | None = None):
        """Initialize the dependency error with package details."""
        if message is None:
            pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
            packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in missing_packages)
            message = f"{feature_name} requires the following packages: {pkg_list}\nInstall with: pip install {packages_str}"
        super().__init__(message)
        self.feature_name = feature_name
        self.missing_packages = missing_packages
