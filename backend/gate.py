class AccessGate:
    """Shared-PIN check. Holds no session state."""

    def __init__(self, secret: str):
        self.secret = secret

    def verify(self, supplied) -> bool:
        # Exact match only: case-sensitive, no trimming
        return isinstance(supplied, str) and supplied == self.secret
