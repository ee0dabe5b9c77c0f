class HomeAgentError(Exception):
    """Base class for errors raised by the agent."""


class ConfigurationError(HomeAgentError):
    """The configuration document exists but cannot be used."""


class ConfigurationCreated(HomeAgentError):
    """A template configuration was written and must be edited before running."""

    def __init__(self, path):
        super().__init__(f"Configuration template written to {path}")
        self.path = path


class SensorReadError(HomeAgentError):
    """A sensor could not be read; missing device, marker and bad value look the same."""

    def __init__(self, message: str = "failed to read sensor temperature"):
        super().__init__(message)
