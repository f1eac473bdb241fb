class ThrottleError(Exception):
    pass

class InvalidConfiguration(ThrottleError, ValueError):
    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"'{field}' must be a positive integer, got {value!r}.")
