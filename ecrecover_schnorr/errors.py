class DomainError(ValueError):
    """Input outside the domain of the scheme (zero key, off-curve x, bad length)."""


class RandomnessError(RuntimeError):
    """The nonce source failed; signing must not continue."""
