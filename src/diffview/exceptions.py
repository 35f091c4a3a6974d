#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the diffview library.

This module defines the exception classes raised while building the diff
model and fetching hidden context. Only whole-diff and whole-file failures
are raised; hunk- and line-level anomalies degrade to partial output.

Exception Hierarchy
-------------------
- DiffViewError (base exception)

  - NoChangesError (diff produced zero files)

  - DiffSourceError (structural diff engine / backend failures)

  - ContentError (reading file content for gap expansion)
    - ContentReadError (I/O failures)
    - ContentDecodingError (invalid text encoding)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for a diff source)
    - ConfigError (configuration file problems)

"""

from typing import Any


class DiffViewError(Exception):
    """Base exception class for all diffview-specific errors.

    Catching this will catch every library-specific error.

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


class NoChangesError(DiffViewError):
    """Exception raised when a diff source yields no files.

    Raised for empty diff text, for text without any recognised file header,
    and for a structural diff without deltas. Callers surface it as
    "nothing to review" rather than retrying.

    Parameters
    ----------
    message : str, optional
        Custom error message. If not provided, uses default message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str | None = None, original_error: Exception | None = None):
        """Initialize the no changes error."""
        if message is None:
            message = "No changes to review"
        super().__init__(message, original_error=original_error)


class DiffSourceError(DiffViewError):
    """Exception raised when the underlying diff engine or backend fails.

    Parameters
    ----------
    message : str
        Description of the failure
    source_name : str, optional
        Name of the diff source that failed (e.g. "structural")
    original_error : Exception, optional
        The engine exception being wrapped

    Attributes
    ----------
    source_name : str or None
        Name of the failing source

    """

    def __init__(self, message: str, source_name: str | None = None, original_error: Exception | None = None):
        """Initialize the diff source error."""
        super().__init__(message, original_error=original_error)
        self.source_name = source_name


class ContentError(DiffViewError):
    """Base exception for errors while reading file content.

    Parameters
    ----------
    message : str
        Description of the error
    file_path : str, optional
        Path of the file whose content was requested
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    file_path : str or None
        Path to the file that caused the error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the content error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class ContentReadError(ContentError):
    """Exception raised when file content cannot be read.

    Parameters
    ----------
    file_path : str
        Path to the file that could not be read
    message : str, optional
        Custom error message. If not provided, uses default message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the content read error."""
        if message is None:
            message = f"Cannot read file: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class ContentDecodingError(ContentError):
    """Exception raised when file content is not valid text.

    Historical and working-tree content must decode as UTF-8. Anything else
    is reported as corrupted content and is not retried.

    Parameters
    ----------
    file_path : str
        Path to the file with invalid content
    message : str, optional
        Custom error message. If not provided, uses default message
    original_error : Exception, optional
        The decoding exception

    """

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the content decoding error."""
        if message is None:
            message = f"Invalid UTF-8 in file: {file_path}"
            if original_error is not None:
                message += f" ({original_error})"
        super().__init__(message, file_path=file_path, original_error=original_error)


class ValidationError(DiffViewError):
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


class InvalidOptionsError(ValidationError):
    """Exception raised when a diff source receives the wrong options class.

    Parameters
    ----------
    source_name : str
        Name of the diff source that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    source_name : str
        Name of the diff source
    expected_type : type
        Expected options class
    received_type : type
        Received options class

    """

    def __init__(
        self,
        source_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{source_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.source_name = source_name
        self.expected_type = expected_type
        self.received_type = received_type


class ConfigError(ValidationError):
    """Exception raised for unreadable or invalid configuration files.

    Parameters
    ----------
    message : str
        Description of the configuration problem
    config_path : str, optional
        Path of the offending configuration file
    parameter_name : str, optional
        Offending key, when the problem is a single entry
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    config_path : str or None
        Path of the configuration file

    """

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        parameter_name: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the configuration error."""
        super().__init__(message, parameter_name=parameter_name, original_error=original_error)
        self.config_path = config_path
