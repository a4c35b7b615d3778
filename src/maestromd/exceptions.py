#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the maestromd library.

This module defines the exception classes raised by the markdown pipeline.
Grammar anomalies in the input are never errors: malformed markdown always
produces some tree. The exceptions below cover programming mistakes (wrong
options, unknown render targets), internal mapping gaps in the parser, and
resource failures such as image loading.

Exception Hierarchy
-------------------
- MaestroMdError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for a parser or renderer)

  - ParsingError (tree construction failures)
    - UnhandledNodeError (grammar node kind with no tree mapping)

  - RenderingError (output generation failures)

  - ImageResolutionError (a single image could not be loaded)

  - SecurityError (security violations)
    - NetworkSecurityError (blocked schemes, disabled network, size limits)

  - DependencyError (missing/incompatible packages)

"""

from typing import Any


class MaestroMdError(Exception):
    """Base exception class for all maestromd-specific errors.

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


class ValidationError(MaestroMdError):
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
    """Exception raised when an incorrect options class is provided.

    For example, passing ``HtmlRendererOptions`` to the plain-text renderer.

    Parameters
    ----------
    converter_name : str
        Name of the parser or renderer that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{converter_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(MaestroMdError):
    """Exception raised when the document tree cannot be built.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class UnhandledNodeError(ParsingError):
    """Exception raised when the grammar emits a node kind with no tree mapping.

    This is an internal programming error rather than a problem with the
    input text, so it is never recovered from.

    Parameters
    ----------
    node_kind : str
        The grammar node kind that has no mapping
    node_level : str
        Either ``"block"`` or ``"inline"``

    """

    def __init__(self, node_kind: str, node_level: str, message: str | None = None):
        """Initialize the error naming the offending node kind."""
        if message is None:
            message = f"Unhandled {node_level} node kind: '{node_kind}'"
        super().__init__(message, parsing_stage=f"{node_level}_mapping")
        self.node_kind = node_kind
        self.node_level = node_level


class RenderingError(MaestroMdError):
    """Exception raised when output rendering fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class ImageResolutionError(MaestroMdError):
    """Exception raised when a single image cannot be loaded.

    Parameters
    ----------
    message : str
        Description of the failure
    source : str, optional
        The image source as written in the document
    original_error : Exception, optional
        The underlying exception

    """

    def __init__(self, message: str, source: str | None = None, original_error: Exception | None = None):
        """Initialize the image resolution error."""
        super().__init__(message, original_error)
        self.source = source


class SecurityError(MaestroMdError):
    """Base exception for security violations.

    Parameters
    ----------
    message : str
        Description of the security violation
    original_error : Exception, optional
        The original exception that caused this error

    """


class NetworkSecurityError(SecurityError):
    """Exception raised when a network security policy blocks a request.

    This includes disallowed URL schemes, globally disabled network access
    and responses exceeding the size limit.

    """


class DependencyError(MaestroMdError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    converter_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    install_command : str, optional
        Suggested pip install command to resolve the issue
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        install_command: str = "",
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        self.original_import_error = original_import_error
        if message is None:
            message_parts = []

            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{converter_name} requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{converter_name} has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            if install_command:
                message += f"\nInstall with: {install_command}"
            else:
                all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
                if all_packages:
                    packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                    message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message, original_import_error)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.install_command = install_command


__all__ = [
    "MaestroMdError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "UnhandledNodeError",
    "RenderingError",
    "ImageResolutionError",
    "SecurityError",
    "NetworkSecurityError",
    "DependencyError",
]
