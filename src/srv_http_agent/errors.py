"""Exceptions raised by srv-http-agent."""


class ConfigurationError(TypeError):
    """Invalid agent configuration, raised at construction time."""


class SrvLookupError(LookupError):
    """An SRV query failed: transport error, timeout or negative answer."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"SRV lookup for {name} failed: {reason}")
        self.name = name
        self.reason = reason
