"""Exception classes."""


class MatchError(ValueError):
    """Base class for errors raised while encoding a match.

    Attributes:
        kind (str): short name of the error class, e.g. "FormatError"

    """

    @property
    def kind(self):
        """Return name of the concrete error class."""
        return type(self).__name__


class FormatError(MatchError):
    """Malformed address or CIDR literal, wrong family or octet count."""


class RangeError(MatchError):
    """Numeric value outside a field's domain, or an inverted range."""


class ParseError(MatchError):
    """Text could not be parsed as an address at all."""


class ExpressionError(MatchError):
    """Match expression names an unknown factory or has bad arguments."""
