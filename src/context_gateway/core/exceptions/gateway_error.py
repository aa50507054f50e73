class GatewayError(Exception):
    """
    Base class for all gateway exceptions.
    Ensures a consistent exception hierarchy for catching gateway-specific issues.
    """

    pass
