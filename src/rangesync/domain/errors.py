class RangeSyncError(Exception):
    """base class for exceptions in rangesync."""
    pass

class LexError(RangeSyncError):
    """raised when text is not lexically well-formed (unterminated quote, unbalanced brackets)."""
    def __init__(self, text: str, position: int, reason: str):
        self.text = text
        self.position = position
        self.reason = reason
        super().__init__(f"{reason} at offset {position}")

class DecodeError(RangeSyncError):
    """raised when a reference token has no valid range syntax."""
    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Not a range reference: '{token}'")

class ConfigError(RangeSyncError):
    """raised when the config file cannot be written or holds an invalid value."""
    pass
