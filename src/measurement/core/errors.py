import enum
import typing


class ErrorKind(enum.Enum):
    """The kinds of failure that operations in this package may report."""

    INVALID_ARGUMENT = 'invalid argument'
    INCOMMENSURABLE = 'incommensurable'
    INVALID_OPERATION = 'invalid operation'
    DIVIDE_BY_ZERO = 'divide by zero'


class MeasurementError(Exception):
    """Base class for errors raised by this package."""

    kind: ErrorKind = None

    def __init__(self, message: str=None) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        if self.message:
            return f"{self.message} ({self.kind.value})"
        return self.kind.value


class InvalidArgumentError(MeasurementError, ValueError):
    """An argument has an unusable value."""

    kind = ErrorKind.INVALID_ARGUMENT


class IncommensurableError(MeasurementError):
    """The operands do not share a common dimensional basis."""

    kind = ErrorKind.INCOMMENSURABLE

    def __init__(self, this: typing.Any, that: typing.Any=None) -> None:
        self.this = this
        self.that = that
        if that is None:
            message = f"{this!s} is not dimensionless"
        else:
            message = f"Can't combine [{this!s}] with [{that!s}]"
        super().__init__(message)


class InvalidOperationError(MeasurementError, TypeError):
    """The operation is not supported for these operands."""

    kind = ErrorKind.INVALID_OPERATION


class DivideByZeroError(MeasurementError, ZeroDivisionError):
    """Attempted division by a zero magnitude."""

    kind = ErrorKind.DIVIDE_BY_ZERO


class UnresolvedUnitError(InvalidArgumentError):
    """A unit identifier did not match any known unit."""

    def __init__(
        self,
        name: str,
        suggested: typing.Optional[typing.List[str]]=None,
    ) -> None:
        self.name = name
        self.suggested = suggested or []
        super().__init__(f"Could not find a unit matching {name!r}")

    def __str__(self) -> str:
        base = super().__str__()
        if not self.suggested:
            return base
        if len(self.suggested) == 1:
            return f"{base}. Did you mean {self.suggested[0]!r}?"
        return f"{base}. Did you mean one of {self.suggested}?"


def require_text(text: typing.Any, name: str='text') -> str:
    """Raise `InvalidArgumentError` unless `text` is a non-blank string."""
    if not isinstance(text, str) or not text.strip():
        raise InvalidArgumentError(
            f"{name} must contain at least one non-whitespace character"
        ) from None
    return text
