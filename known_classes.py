# ============================================================
# Known Name Classes
# Class accounts that tag typed ANS sub-records.
#
# NOTE: reverse lookup accounts of a TLD are classed with that
# TLD's house account, so every known TLD contributes one entry.
# Other classes (DNS records, ...) come from ANS_KNOWN_CLASSES.
# ============================================================
from pda import TLD_HOUSE_PROGRAM_ID, find_tld_house

REVERSE_LOOKUP = "reverse lookup"
DNS_RECORD = "DNS record"

KNOWN_TLDS = [
    ".abc",
    ".bonk",
    ".poor",
    ".monke",
    ".ser",
    ".sol",
]


def build_known_classes(tlds=None, extra=None, tld_house_program_id=None):
    """Returns {class pubkey: label} for `tlds` merged with `extra`."""
    tlds = KNOWN_TLDS if tlds is None else tlds
    program_id = tld_house_program_id or TLD_HOUSE_PROGRAM_ID
    table = {find_tld_house(tld, program_id): REVERSE_LOOKUP for tld in tlds}
    if extra:
        table.update(extra)
    return table
