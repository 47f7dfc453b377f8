class TableError(Exception):
    """Base class of all errors raised while reading or laying out a table."""


class ConfigError(TableError, ValueError):
    """Invalid split point, shape or option combination."""


class ShapeMismatchError(TableError, ValueError):
    """The value array does not hold exactly product(shape) values."""


class LabelLookupError(TableError, LookupError):
    """The reader has no id or label for the requested index."""


class ReaderError(TableError, ValueError):
    """The source document cannot be read as a json-stat dataset."""
