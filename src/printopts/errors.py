## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark


class OptionError(Exception):
    def __init__(self, message: str = "", *, option_name=None, option_value=None):
        """Base class for all errors raised by the strict channel."""
        super().__init__(message)
        self.option_name: str = option_name
        self.option_value: str = option_value

class OptionParseError(OptionError):
    def __init__(self, message, *, source=None, line=None, column=None, token=None):
        super().__init__(message)
        self.source = source
        self.line = line
        self.column = column
        self.token = token

class OptionIncompleteParse(OptionParseError, lark.exceptions.ParseError):
    def __init__(self, message, *, source=None, line=None, column=None, token=None):
        super().__init__(message, source=source, line=line, column=column, token=token)

class OptionNameError(OptionError, ValueError):
    pass

class OptionValueError(OptionError, ValueError):
    pass


class OptionStorageError(OptionError, MemoryError):
    """Store could not grow, either from its `max_options` bound or a real MemoryError."""
    def __init__(self, message: str = "", *, option_name=None, option_value=None, capacity=None):
        super().__init__(message, option_name=option_name, option_value=option_value)
        self.capacity = capacity
