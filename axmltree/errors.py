from typing import Union


class ResParserError(IOError):
    """Exception for malformed chunk structure in the binary stream"""

    pass


class FormatError(ValueError):
    """
    Raised when an attribute payload can not be decoded for its type tag,
    or when a complex value does not survive re-encoding.

    `location` holds the tag path of the node the attribute belonged to,
    once the error passed through the tree builder.
    """

    def __init__(self, message: str, location: Union[str, None] = None) -> None:
        super().__init__(message)
        self.location = location

    def __str__(self):
        message = super().__str__()
        if self.location:
            return "{} (at <{}>)".format(message, self.location)
        return message


class NullContextError(RuntimeError):
    """An attribute, text or end event arrived while no element was open"""

    pass
