class AnsError(Exception):
    """Base class for every ANS lookup failure."""


class DecodeError(AnsError):
    pass


class InvalidDomainError(AnsError, ValueError):
    pass


class ConfigError(AnsError):
    pass


class TransportError(AnsError):
    """Raised by a fetch collaborator when the RPC node can't be reached or answers with an error."""


class NotFoundError(AnsError):
    """A name account does not exist at its derived address.

    `label` is the first missing label and `depth` its position counted from
    the TLD (0 = the TLD itself), so callers can tell an unregistered TLD
    from a missing domain or subdomain. Lookups that aren't part of a
    domain walk leave `depth` unset.
    """

    def __init__(self, label, depth=None, address=None):
        self.label = label
        self.depth = depth
        self.address = address
        if depth is None:
            what = "account"
        else:
            what = "TLD" if depth == 0 else "name"
        msg = f"{what} '{label}' not found"
        if address is not None:
            msg += f" at {address}"
        super().__init__(msg)

    @property
    def is_tld(self):
        return self.depth == 0
