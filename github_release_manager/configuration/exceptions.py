"""Contains exceptions raised when reconciling application configuration."""


class GitHubAuthenticationConfigurationUndefinedError(Exception):
    """Raised when the GitHub authentication configuration is undefined."""

    pass


class RequiredConfigurationElementError(Exception):
    """Raised when a required configuration element is missing or invalid."""

    def __init__(self, name: str, cli_name: str, env_name: str, reason: str = "missing") -> None:
        """Initializes the exception with the name of the offending element."""
        super().__init__(f"Invalid required configuration element: {name} is {reason} (command line option {cli_name}, environment variable {env_name})")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name
        self.reason = reason
