"""Locate paired read files on disk for a sample.

Two search modes:

- `find_reads` matches files by sample id inside a single directory and
  requires exactly one read 1 and one read 2 file, as used by QC configs.
- `find_cleaned_reads` classifies every file in a sample directory, keeping
  any unpaired file as a singleton, as used for assembly inputs.

Directory access goes through a listing object so the matching rules can be
exercised against in-memory file lists.
"""
import collections
import fnmatch
import glob
import os
import re

from yap.log import logger

READ1_MARKERS = ("READ1", "_R1")
READ2_MARKERS = ("READ2", "_R2")

READ1_REGEX = re.compile(r"^(.+?)(_|-)(?i:R1|1|read1|read_1|read-1)(?:.*)$")
READ2_REGEX = re.compile(r"^(.+?)(_|-)(?i:R2|2|read2|read_2|read-2)(?:.*)$")

ReadFiles = collections.namedtuple("ReadFiles", ["read_1", "read_2", "singleton"])

class ReadFileError(Exception):
    def __init__(self, sample_id, matches, msg):
        self.sample_id = sample_id
        self.matches = list(matches)
        super(ReadFileError, self).__init__(msg)

class MissingReadFile(ReadFileError, IOError):
    def __init__(self, sample_id, matches, pattern=None):
        msg = ("Cannot find both read files for %s. Found: %s. "
               "Use --id if the sample id is only part of the file names." %
               (sample_id, self._fmt(matches)))
        if pattern:
            msg += " Search pattern: %s" % pattern
        super(MissingReadFile, self).__init__(sample_id, matches, msg)

    @staticmethod
    def _fmt(matches):
        return ", ".join(matches) if matches else "no files"

class AmbiguousReadFiles(ReadFileError, ValueError):
    def __init__(self, sample_id, matches):
        super(AmbiguousReadFiles, self).__init__(
            sample_id, matches,
            "Required two read files for %s, found %s: %s" % (sample_id, len(matches), ", ".join(matches)))

class GlobListing(object):
    """List candidate read files on the filesystem.
    """
    def match(self, pattern):
        return sorted(glob.glob(pattern))

    def files_in(self, dirname):
        return sorted(x for x in glob.glob(os.path.join(dirname, "*")) if os.path.isfile(x))

class StaticListing(object):
    """List candidate read files from a fixed set of paths.
    """
    def __init__(self, paths):
        self.paths = [os.path.normpath(x) for x in paths]

    def match(self, pattern):
        pattern = os.path.normpath(pattern)
        return sorted(x for x in self.paths
                      if os.path.dirname(x) == os.path.dirname(pattern) and
                      fnmatch.fnmatchcase(os.path.basename(x), os.path.basename(pattern)))

    def files_in(self, dirname):
        dirname = os.path.normpath(dirname)
        return sorted(x for x in self.paths if os.path.dirname(x) == dirname)

def read_pattern(anchor_dir, sample_id, id_is_substring=False):
    """Glob pattern for a sample's reads: id at the start, or anywhere in the name.
    """
    if id_is_substring:
        fname = "*?%s?*" % glob.escape(sample_id)
    else:
        fname = "%s?*" % glob.escape(sample_id)
    return os.path.join(anchor_dir, fname)

def read_slot(path):
    """Classify a read file as 1 or 2 from its file name, None if neither.
    """
    name = os.path.basename(path).upper()
    if any(x in name for x in READ1_MARKERS):
        return 1
    elif any(x in name for x in READ2_MARKERS):
        return 2
    return None

def _check_match_count(sample_id, matches, pattern):
    if len(matches) < 2:
        raise MissingReadFile(sample_id, matches, pattern)
    elif len(matches) > 2:
        raise AmbiguousReadFiles(sample_id, matches)

def find_reads(anchor_dir, sample_id, id_is_substring=False, listing=None):
    """Find exactly one read 1 and one read 2 file for a sample.
    """
    listing = listing or GlobListing()
    pattern = read_pattern(anchor_dir, sample_id, id_is_substring)
    matches = listing.match(pattern)
    _check_match_count(sample_id, matches, pattern)
    slots = {1: [], 2: []}
    for fname in matches:
        slot = read_slot(fname)
        if slot:
            slots[slot].append(fname)
    if len(slots[1]) != 1 or len(slots[2]) != 1:
        raise MissingReadFile(sample_id, matches, pattern)
    return ReadFiles(slots[1][0], slots[2][0], None)

def find_cleaned_reads(dirname, sample_id, listing=None):
    """Classify every file in a cleaned read directory.

    Returns None when the directory holds no read 1 file.
    """
    listing = listing or GlobListing()
    files = listing.files_in(dirname)
    read_1, read_2, singles = [], [], []
    for fname in files:
        base = os.path.basename(fname)
        if READ1_REGEX.match(base):
            read_1.append(fname)
        elif READ2_REGEX.match(base):
            read_2.append(fname)
        else:
            singles.append(fname)
    if not read_1:
        logger.warning("No read 1 file found in %s, skipping %s" % (dirname, sample_id))
        return None
    if not read_2:
        raise MissingReadFile(sample_id, files)
    if len(read_1) > 1 or len(read_2) > 1 or len(singles) > 1:
        raise AmbiguousReadFiles(sample_id, files)
    return ReadFiles(read_1[0], read_2[0], singles[0] if singles else None)

def auto_find_cleaned_dirs(root, dirname):
    """Find cleaned read directories below root, as (sample_id, directory) pairs.

    The sample id is the first directory level below root.
    """
    out = []
    for cur_dir, subdirs, _ in os.walk(root):
        subdirs.sort()
        rel_dir = os.path.relpath(cur_dir, root)
        if rel_dir != os.curdir and dirname in os.path.basename(cur_dir):
            parts = rel_dir.split(os.sep)
            if len(parts) < 2:
                raise ValueError("Invalid folder structure for automatic search: %s. "
                                 "Expected <root>/<sample>/<%s dir>." % (cur_dir, dirname))
            out.append((parts[0], cur_dir))
            subdirs[:] = []
    return out
