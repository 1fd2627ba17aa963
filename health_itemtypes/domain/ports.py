"""Domain Ports - Fault Hierarchy, Result Type and Source Contracts.

This module defines the exceptions raised by item type records and the codec,
the Result type used by adapters to report per-record outcomes, and the Port
interface that bulk sources of item types must implement.

Security Impact:
    - Faults always name the offending element or field so malformed payloads
      can be traced without logging the payload itself
    - Invalid records never leave the domain silently: parse, validation and
      serialization problems are terminal for the operation in progress

Architecture:
    - Pure domain definitions with zero infrastructure dependencies
    - Adapters (export files, API responses, etc.) implement ThingSourcePort
    - Iterator pattern enables memory-efficient streaming of large exports
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Iterator, Optional, TypeVar, Union

# Type variable for Result generic
T = TypeVar('T')


# ============================================================================
# Result Type for Success/Failure Communication
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """Result type for communicating success or failure without exceptions.

    Bulk readers yield one Result per record so that a single malformed record
    does not abort the remaining records of an export.

    Attributes:
        success: True if the operation succeeded, False otherwise
        value: The successful result value (only present if success=True)
        error: Error message (only present if success=False)
        error_type: Type of error (ParseFault, ValidationFault, etc.)
        error_details: Additional error context (source, record_index, etc.)

    Example:
        ```python
        for result in reader.read("export.xml"):
            if result.success:
                handle(result.value)
            else:
                log_error(result.error, result.error_details)
        ```
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_details: Optional[dict] = None

    @classmethod
    def success_result(cls, value: T) -> 'Result[T]':
        """Create a successful result.

        Parameters:
            value: The successful result value

        Returns:
            Result: Success result with the value
        """
        return cls(success=True, value=value)

    @classmethod
    def failure_result(
        cls,
        error: Union[str, Exception],
        error_type: Optional[str] = None,
        error_details: Optional[dict] = None
    ) -> 'Result[T]':
        """Create a failure result.

        Parameters:
            error: Error message or exception
            error_type: Type of error (e.g., "ParseFault")
            error_details: Additional context (source, record_index, etc.)

        Returns:
            Result: Failure result with error information
        """
        error_message = str(error) if isinstance(error, Exception) else error
        error_type_name = error_type or (type(error).__name__ if isinstance(error, Exception) else "UnknownError")

        return cls(
            success=False,
            value=None,
            error=error_message,
            error_type=error_type_name,
            error_details=error_details or {}
        )

    def is_success(self) -> bool:
        """Check if result is successful."""
        return self.success

    def is_failure(self) -> bool:
        """Check if result is a failure."""
        return not self.success


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class ItemTypeError(Exception):
    """Base exception for all item type faults."""
    pass


class ParseFault(ItemTypeError):
    """Raised when an XML fragment cannot be turned into a record.

    Covers a structurally required element that is missing as well as a
    present element whose text does not convert to the declared scalar type.

    Attributes:
        element: Name of the offending element (or attribute)
        record_type: Name of the record type being parsed, filled in by the
            innermost record that sees the fault
    """

    def __init__(self, message: str, element: Optional[str] = None, record_type: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.element = element
        self.record_type = record_type

    def __str__(self) -> str:
        context = []
        if self.record_type:
            context.append(f"record={self.record_type}")
        if self.element:
            context.append(f"element={self.element}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class ValidationFault(ItemTypeError, ValueError):
    """Raised when a value assigned to a field violates its constraint.

    Raised at the point of assignment so an invalid record state can never be
    observed afterwards.

    Attributes:
        field: Name of the field that rejected the value
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class SerializationFault(ItemTypeError):
    """Raised when a record is written while a mandatory field is unset.

    Attributes:
        field: Name of the mandatory field that has no value
        record_type: Name of the record type being written
    """

    def __init__(self, message: str, field: Optional[str] = None, record_type: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.record_type = record_type


class SourceNotFoundError(ItemTypeError):
    """Raised when an export source cannot be found or accessed.

    Attributes:
        source: The source identifier that was not found
    """

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


# ============================================================================
# Source Port
# ============================================================================

class ThingSourcePort(ABC):
    """Abstract contract for bulk sources of item type records.

    Key Principles:
        - Streaming: Yields records one-by-one to prevent memory exhaustion
        - Typed: Successful results carry fully parsed ItemType instances
        - Fail-safe: Per-record faults are reported as failure Results,
          never raised, so one bad record does not stop the export

    Example Usage:
        ```python
        class ExportFileReader(ThingSourcePort):
            def read(self, source: str) -> Iterator[Result]:
                ...

        for result in ExportFileReader().read("export.xml"):
            ...
        ```
    """

    @abstractmethod
    def read(self, source: str) -> Iterator[Result]:
        """Read a source and yield one Result per record.

        Parameters:
            source: Source identifier (file path, URL, etc.)

        Yields:
            Result: Success with the parsed item, or failure with fault details

        Raises:
            SourceNotFoundError: If the source doesn't exist
        """
        pass

    @abstractmethod
    def can_read(self, source: str) -> bool:
        """Check if this adapter can handle the given source.

        Parameters:
            source: Source identifier to check

        Returns:
            bool: True if this adapter can handle the source, False otherwise
        """
        pass
