"""Resolve adapter and index columns from QC configuration rows.

Every row resolves to exactly one adapter descriptor:

- AutoDetect: no sequence supplied; fastp detects adapters itself.
- Single: one adapter sequence used for both reads.
- Dual: separate i5 and i7 sequences, one per read direction.

Adapter columns after the sample id (and after the output name column when
renaming) select the variant by count:

    0  auto-detect
    1  single adapter
    2  dual adapters (i5, i7), or a wildcard i5 followed by its tag
    3  wildcard i5, literal i7, tag for i5
    4  wildcard i5, wildcard i7, tag for i5, tag for i7

All degradation of partially empty dual adapters happens in `normalize_dual`.
"""
import collections

from yap.log import logger
from yap.qc import tag

AutoDetect = collections.namedtuple("AutoDetect", [])
Single = collections.namedtuple("Single", ["sequence"])
Dual = collections.namedtuple("Dual", ["i5", "i7"])

MAX_ADAPTER_FIELDS = 4

class UnsupportedColumnCount(ValueError):
    def __init__(self, count, rename=False):
        self.count = count
        self.rename = rename
        if rename:
            expect = "1 to %s columns after the sample id when renaming (output name first)" % (MAX_ADAPTER_FIELDS + 1)
        else:
            expect = "0 to %s adapter columns after the sample id" % MAX_ADAPTER_FIELDS
        super(UnsupportedColumnCount, self).__init__(
            "Unexpected number of adapter columns: received %s, expected %s" % (count, expect))

class MissingTag(ValueError):
    pass

def normalize_dual(i5, i7):
    """Build a descriptor from an i5/i7 pair, degrading when values are empty.
    """
    i5 = i5.strip().upper()
    i7 = i7.strip().upper()
    if i5 and i7:
        return Dual(i5, i7)
    elif i5:
        return Single(i5)
    elif i7:
        logger.warning("Adapter i7 %s supplied without an i5 adapter, ignoring it "
                       "and using adapter auto-detection." % i7)
    return AutoDetect()

def _single(adapter):
    adapter = adapter.strip()
    if tag.has_wildcard(adapter):
        raise MissingTag("Adapter %s has a wildcard but no tag column to insert." % adapter)
    if not adapter:
        return AutoDetect()
    return Single(adapter.upper())

def _dual_or_inline_tag(i5, i7):
    if tag.has_wildcard(i5):
        # the second column is a tag for the first adapter, not an i7 adapter
        return Single(tag.insert_tag(i5.strip(), i7.strip()))
    return normalize_dual(i5, i7)

def _insert_single(i5, i7, insert):
    if not tag.has_wildcard(i5):
        raise MissingTag("Expected a wildcard in adapter %s to insert tag %s." % (i5, insert))
    return normalize_dual(tag.insert_tag(i5.strip(), insert.strip()), i7)

def _insert_dual(i5, i7, in_i5, in_i7):
    return normalize_dual(tag.insert_tag(i5.strip(), in_i5.strip()),
                          tag.insert_tag(i7.strip(), in_i7.strip()))

_RESOLVERS = {0: lambda: AutoDetect(),
              1: _single,
              2: _dual_or_inline_tag,
              3: _insert_single,
              4: _insert_dual}

def resolve(fields):
    """Resolve adapter columns into a normalized adapter descriptor.
    """
    fields = list(fields)
    if len(fields) not in _RESOLVERS:
        raise UnsupportedColumnCount(len(fields))
    return _RESOLVERS[len(fields)](*fields)

def resolve_with_rename(fields):
    """Resolve columns led by an output name, returning (output_name, adapter).
    """
    fields = list(fields)
    if not fields or not fields[0].strip():
        raise ValueError("Missing an output name column for renaming.")
    if len(fields) - 1 not in _RESOLVERS:
        raise UnsupportedColumnCount(len(fields), rename=True)
    return fields[0].strip(), resolve(fields[1:])

def describe(adapter):
    """Human readable (label, value) pairs for a descriptor.
    """
    if isinstance(adapter, Dual):
        return [("Adapter i5", adapter.i5), ("Adapter i7", adapter.i7)]
    elif isinstance(adapter, Single):
        return [("Adapter", adapter.sequence)]
    else:
        return [("Adapter", "AUTO-DETECT")]
