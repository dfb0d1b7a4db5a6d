"""Retrieve sample information from QC and assembly configuration files.

QC configuration rows (first line is a header):

    id,[output_name,]adapter columns...   reads searched next to the config file
    id:directory                          reads searched in directory, adapters auto-detected

Assembly configuration rows pair a sample id with a directory of cleaned
reads, separated by a comma or a colon.
"""
import collections
import os

from yap.fastq import finder
from yap.log import logger
from yap.qc import adapters, tag

SampleRecord = collections.namedtuple("SampleRecord", ["id", "read_1", "read_2", "singleton",
                                                       "adapter", "output_name", "target_dir"])
SeqDir = collections.namedtuple("SeqDir", ["id", "dir"])

class MalformedConfigRow(ValueError):
    def __init__(self, msg, line_num=None, row=None):
        self.line_num = line_num
        self.row = row
        if line_num is not None:
            msg = "%s\nLine %s: %s" % (msg, line_num, row)
        super(MalformedConfigRow, self).__init__(msg)

def _read_rows(in_file):
    """Yield (line number, stripped row), skipping the header, blanks and comments.
    """
    with open(in_file) as in_handle:
        for i, line in enumerate(in_handle):
            line = line.strip()
            if i == 0 or not line or line.startswith("#"):
                continue
            yield i + 1, line

def split_row(line):
    """Split a configuration row on its separator, returning (separator, fields).
    """
    if "," in line:
        sep = ","
    elif ":" in line:
        sep = ":"
    else:
        raise MalformedConfigRow("Invalid input format. Looking for ',' or ':'")
    return sep, [x.strip() for x in line.split(sep)]

def target_dir_from_read(read_1):
    """Directory name from the first three underscore separated words of read 1.
    """
    words = os.path.basename(read_1).split("_")
    if len(words) < 3:
        raise MalformedConfigRow("Cannot name an output directory from %s: "
                                 "expected at least three '_' separated words" % read_1)
    return "_".join(words[:3])

def _target_dir(sample_id, read_1, output_name, id_is_substring):
    if output_name:
        return output_name
    elif id_is_substring:
        return target_dir_from_read(read_1)
    else:
        return sample_id

def _qc_row(sep, fields, base_dir, id_is_substring, rename, listing):
    sample_id = fields[0]
    if not sample_id:
        raise MalformedConfigRow("Missing sample id")
    output_name = None
    if sep == ":":
        if len(fields) != 2 or not fields[1]:
            raise MalformedConfigRow("Expecting a sample id and a directory path")
        read_dir = fields[1]
        adapter = adapters.AutoDetect()
    else:
        read_dir = base_dir
        if rename:
            if len(fields) < 2 or not fields[1]:
                raise MalformedConfigRow("Missing an output name column for renaming")
            output_name, adapter = adapters.resolve_with_rename(fields[1:])
        else:
            adapter = adapters.resolve(fields[1:])
    reads = finder.find_reads(read_dir, sample_id, id_is_substring, listing=listing)
    return SampleRecord(sample_id, reads.read_1, reads.read_2, reads.singleton, adapter, output_name,
                        _target_dir(sample_id, reads.read_1, output_name, id_is_substring))

def parse_qc_config(in_file, id_is_substring=False, rename=False, skip_missing=False, listing=None):
    """Resolve every row of a QC configuration file into a SampleRecord.

    Malformed rows and adapter specifications abort the whole pass. Read file
    problems are raised too unless `skip_missing` is set, in which case the
    sample is reported and left out.
    """
    base_dir = os.path.dirname(os.path.abspath(in_file))
    samples = []
    seen = set([])
    skipped = 0
    for line_num, line in _read_rows(in_file):
        try:
            sep, fields = split_row(line)
        except MalformedConfigRow as e:
            raise MalformedConfigRow(str(e), line_num, line)
        if fields[0] in seen:
            raise MalformedConfigRow("Sample %s present multiple times in %s" % (fields[0], in_file),
                                     line_num, line)
        seen.add(fields[0])
        try:
            samples.append(_qc_row(sep, fields, base_dir, id_is_substring, rename, listing))
        except finder.ReadFileError as e:
            if not skip_missing:
                raise
            logger.warning("Skipping %s: %s" % (e.sample_id, e))
            skipped += 1
        except MalformedConfigRow as e:
            raise MalformedConfigRow(str(e), line_num, line)
        except (adapters.UnsupportedColumnCount, adapters.MissingTag, tag.InvalidTag):
            logger.error("Invalid adapter columns for sample %s in %s, line %s: %s" %
                         (fields[0], in_file, line_num, line))
            raise
    logger.info("Total samples: %s" % len(samples))
    if skipped:
        logger.warning("Skipped samples with missing or ambiguous read files: %s" % skipped)
    return samples

def parse_sequence_dirs(in_file):
    """Read sample id and cleaned read directory pairs from an assembly configuration.
    """
    out = []
    for line_num, line in _read_rows(in_file):
        try:
            _, fields = split_row(line)
        except MalformedConfigRow as e:
            raise MalformedConfigRow(str(e), line_num, line)
        if len(fields) != 2 or not all(fields):
            raise MalformedConfigRow("Invalid input. Expecting id and directory path, found: %s" % fields,
                                     line_num, line)
        out.append(SeqDir(*fields))
    return out

def _cleaned_record(sample_id, dirname, listing=None):
    reads = finder.find_cleaned_reads(dirname, sample_id, listing=listing)
    if reads is None:
        return None
    return SampleRecord(sample_id, reads.read_1, reads.read_2, reads.singleton,
                        adapters.AutoDetect(), None, sample_id)

def find_assembly_samples(in_file, listing=None):
    """SampleRecords for an assembly configuration file.
    """
    samples = [_cleaned_record(x.id, x.dir, listing) for x in parse_sequence_dirs(in_file)]
    samples = [x for x in samples if x is not None]
    logger.info("Total samples: %s" % len(samples))
    return samples

def auto_find_assembly_samples(root, dirname, listing=None):
    """SampleRecords for cleaned read directories found below root.
    """
    samples = [_cleaned_record(sample_id, cur_dir, listing)
               for sample_id, cur_dir in finder.auto_find_cleaned_dirs(root, dirname)]
    samples = [x for x in samples if x is not None]
    logger.info("Total samples: %s" % len(samples))
    return samples
