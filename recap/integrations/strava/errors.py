"""Errors raised by the Strava client."""


class StravaAPIError(Exception):
    """Strava answered with a non-success status code."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"Strava API error <{status_code}>: {message}")
        self.status_code = status_code
        self.message = message


class StravaRateLimitError(StravaAPIError):
    """Strava answered 429 Too Many Requests."""

    def __init__(self, message: str = "Rate limit exceeded"):
        super().__init__(429, message)
