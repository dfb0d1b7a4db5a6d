"""Insert per-sample index tags into wildcard adapter templates.

Adapter templates mark the barcode position with `*`:

    ATTTGT*C + ATG -> ATTTGTTACC

The tag is base-wise complemented (not reversed) before insertion.
"""
from Bio.Seq import Seq

WILDCARD = "*"
VALID_BASES = frozenset("ATGC")

class InvalidTag(ValueError):
    def __init__(self, tag):
        self.tag = tag
        bad = sorted(set(tag.upper()) - VALID_BASES)
        super(InvalidTag, self).__init__(
            "Invalid tag DNA sequence %s: unexpected characters %s. "
            "Tags may only contain A, T, G and C." % (tag, ", ".join(repr(x) for x in bad)))

def has_wildcard(adapter):
    return WILDCARD in adapter

def check_tag(tag):
    if not set(tag.upper()) <= VALID_BASES:
        raise InvalidTag(tag)
    return tag

def complement_tag(tag):
    """Complement each base of a tag, keeping the original order.
    """
    tag = check_tag(tag).upper()
    return str(Seq(tag).complement())

def insert_tag(template, tag):
    """Substitute the complemented tag for the wildcard in an adapter template.
    """
    return template.replace(WILDCARD, complement_tag(tag)).upper()
