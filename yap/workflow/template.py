"""Create QC input files from a directory of raw read files.

Finds gzipped read 1 files, builds sample ids from the leading words of their
names and writes a starting configuration that can be edited by hand:

- csv: `id,new_name` header and one `id,` row per sample, ready for adapters
- conf: `[seqs]` header and `id:/absolute/read/dir/` rows
"""
import os
import re

from yap.log import logger

READ1_GZ_REGEX = re.compile(r"(_|-)((?i:read|r)1)(?:.*)(gz|gzip)")
BASE_NAME = "yap-qc_input"

def is_read1_gz(fname):
    return READ1_GZ_REGEX.search(fname) is not None

def construct_id(fname, word_len=3, sep="_"):
    """Sample id from the first `word_len` separated words of a file name.
    """
    words = fname.split(sep)
    if len(words) <= word_len:
        raise ValueError("File name %s has too few '%s' separated words for an id of %s words" %
                         (fname, sep, word_len))
    return sep.join(words[:word_len])

def find_samples(path, word_len=3, sep="_"):
    """Map sample ids to the absolute directory of their read files, first directory wins.
    """
    samples = {}
    for cur_dir, subdirs, files in os.walk(path):
        subdirs.sort()
        for fname in sorted(files):
            if is_read1_gz(fname):
                sample_id = construct_id(fname, word_len, sep)
                if sample_id not in samples:
                    samples[sample_id] = os.path.realpath(cur_dir)
    return samples

def write_input_file(samples, out_file, is_csv=False):
    with open(out_file, "w") as out_handle:
        if is_csv:
            out_handle.write("id,new_name\n")
        else:
            out_handle.write("[seqs]\n")
        for sample_id in sorted(samples):
            if is_csv:
                out_handle.write("%s,\n" % sample_id)
            else:
                out_handle.write("%s:%s/\n" % (sample_id, samples[sample_id]))
    return out_file

def setup(path, word_len=3, sep="_", is_csv=False, out_dir=None):
    """Search `path` for read files and write an input file to `out_dir`.
    """
    samples = find_samples(path, word_len, sep)
    if not samples:
        logger.warning("No gzipped read 1 files found in %s" % path)
    fname = "%s.%s" % (BASE_NAME, "csv" if is_csv else "conf")
    out_file = os.path.abspath(os.path.join(out_dir or os.getcwd(), fname))
    write_input_file(samples, out_file, is_csv)
    logger.info("Done! Found %s samples. The result is saved as %s" % (len(samples), out_file))
    return out_file
