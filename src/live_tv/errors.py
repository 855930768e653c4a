"""Error types raised by the Live TV core."""


class ChannelError(Exception):
    """Base class for all channel directory errors."""

    status_code = 400


class ValidationError(ChannelError):
    """A required field is missing or the URL is not valid for its type."""


class NotFoundError(ChannelError):
    """An operation referenced a channel id that does not exist."""

    status_code = 404

    def __init__(self, channel_id):
        super().__init__(f"Channel not found: {channel_id}")
        self.channel_id = channel_id


class FormatError(ChannelError):
    """An import document is malformed or holds no usable channels."""


class PersistenceError(ChannelError):
    """The persistence backend failed to read or write."""

    status_code = 500
