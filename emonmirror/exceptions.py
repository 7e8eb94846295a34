class EmonError(Exception): ...


class ConfigError(EmonError): ...


class TimingError(EmonError): ...


class SourceError(EmonError):
    """Failure talking to the remote feed source."""

    retryable: bool = False


class TransportError(SourceError):
    retryable = True


class RemoteError(SourceError): ...


class ExportError(EmonError): ...


def require(condition: bool, message: str, exc: type[EmonError] = EmonError):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)
