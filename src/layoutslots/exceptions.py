#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the layoutslots library.

This module defines specialized exception classes for the error conditions
that can occur while transforming, deduplicating, and persisting email
layout templates. Most conditions in the slot engine are recovered locally
(grammar mismatches, corrupted image markup, failed previews); the classes
below cover the ones that callers must be able to tell apart.

Exception Hierarchy
-------------------
- LayoutSlotsError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for parser/renderer)

  - ParsingError (markup that cannot be parsed into a tree)

  - RenderingError (markup generation failures)

  - TransformError (tree transformation failures)

  - DropZoneError (block dropped outside its permitted zone)

  - ServiceError (template store, preview compiler, product catalog)
    - TemplateNotFoundError (unknown template id)
    - TemplateSaveError (save rejected or failed in transit)
    - PreviewCompilationError (markup could not be compiled to HTML)

  - DependencyError (missing optional packages)

"""

from typing import Any


class LayoutSlotsError(Exception):
    """Base exception class for all layoutslots-specific errors.

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


class ValidationError(LayoutSlotsError):
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

    Parameters
    ----------
    component_name : str
        Name of the parser or renderer that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received

    """

    def __init__(
        self,
        component_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{component_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(LayoutSlotsError):
    """Exception raised when markup cannot be parsed into a document tree.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class RenderingError(LayoutSlotsError):
    """Exception raised when markup rendering fails.

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


class TransformError(LayoutSlotsError):
    """Exception raised when a tree transformation fails.

    Parameters
    ----------
    message : str
        Description of the transform failure
    transform_name : str, optional
        Name of the transform that failed
    original_error : Exception, optional
        The underlying exception that caused the transform failure

    """

    def __init__(self, message: str, transform_name: str | None = None, original_error: Exception | None = None):
        """Initialize the transform error."""
        super().__init__(message, original_error)
        self.transform_name = transform_name


class DropZoneError(LayoutSlotsError):
    """Exception raised when a block is dropped outside its permitted zone.

    The editing session reports drop failures as transient notices; this
    exception is only raised when a caller asks for strict drops.

    Parameters
    ----------
    message : str
        User-facing description of the violation
    block_id : str, optional
        Identifier of the dragged block
    block_class : str, optional
        Classification of the dragged block ("content", "structure", "unknown")

    """

    def __init__(self, message: str, block_id: str | None = None, block_class: str | None = None):
        """Initialize the drop-zone error."""
        super().__init__(message)
        self.block_id = block_id
        self.block_class = block_class


class ServiceError(LayoutSlotsError):
    """Base exception for failures of the remote layout service.

    Parameters
    ----------
    message : str
        Description of the failure
    status_code : int, optional
        HTTP status code returned by the service, if any
    original_error : Exception, optional
        The underlying transport or decoding exception

    """

    def __init__(self, message: str, status_code: int | None = None, original_error: Exception | None = None):
        """Initialize the service error."""
        super().__init__(message, original_error)
        self.status_code = status_code


class TemplateNotFoundError(ServiceError):
    """Exception raised when a template id is unknown to the store."""

    def __init__(self, template_id: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the not-found error."""
        if message is None:
            message = f"Template not found: {template_id}"
        super().__init__(message, status_code=404, original_error=original_error)
        self.template_id = template_id


class TemplateSaveError(ServiceError):
    """Exception raised when persisting a template fails."""


class PreviewCompilationError(ServiceError):
    """Exception raised when markup cannot be compiled to preview HTML."""


class DependencyError(LayoutSlotsError):
    """Exception raised when required optional dependencies are not available.

    Parameters
    ----------
    feature_name : str
        Name of the feature requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        feature_name: str,
        missing_packages: list[tuple[str, str]],
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        self.original_import_error = original_import_error
        if message is None:
            pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
            packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in missing_packages)
            message = f"{feature_name} requires the following packages: {pkg_list}\nInstall with: pip install {packages_str}"
        super().__init__(message, original_error=original_import_error)
        self.feature_name = feature_name
        self.missing_packages = missing_packages


__all__ = [
    "LayoutSlotsError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "RenderingError",
    "TransformError",
    "DropZoneError",
    "ServiceError",
    "TemplateNotFoundError",
    "TemplateSaveError",
    "PreviewCompilationError",
    "DependencyError",
]
