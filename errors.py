class SyraError(Exception):
    pass


class InputError(SyraError, ValueError):
    """Raised for bad caller input, before any cryptographic work starts."""


class MissingKeyMaterial(InputError):
    pass


class KeyMaterialError(InputError):
    pass


class ClaimTooLong(InputError):
    pass


class WitnessMismatch(InputError):
    pass


class TokenFormatError(InputError):
    pass


class ProofFormatError(InputError):
    pass


class ExternalProverError(SyraError):
    """An external proving tool failed. Carries its stderr, never retried."""

    def __init__(self, message, stderr=""):
        super().__init__(message)
        self.stderr = stderr


class IssuanceError(SyraError):
    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status
