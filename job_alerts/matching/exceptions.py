"""Matching engine exceptions.

These never escape AlertProcessor: they are converted into the ``error``
field of an AlertProcessResult.
"""


class MatchingError(Exception):
    """Base exception for matching engine errors."""

    pass


class AlertNotFoundError(MatchingError):
    """Raised when an alert does not exist or has been deactivated."""

    def __init__(self, alert_id: str):
        self.alert_id = alert_id
        super().__init__("Job alert not found or inactive")


class UserNotFoundError(MatchingError):
    """Raised when the owner of an alert no longer exists."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("User not found")
