class MeterProfileError(Exception): ...


class ConfigError(MeterProfileError): ...


class UnitError(MeterProfileError): ...


def require(
    condition: bool, message: str, exc: type[MeterProfileError] = MeterProfileError
):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)
