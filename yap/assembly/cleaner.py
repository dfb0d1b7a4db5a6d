"""Remove SPAdes intermediate files, keeping final contigs, scaffolds and logs.
"""
import os

from yap import utils
from yap.log import logger

KEEP_FILES = set(["contigs.fasta", "scaffolds.fasta", "spades.log", "warnings.log"])

def find_assembly_dirs(path):
    """Directories below path containing a spades.log file.
    """
    out = []
    for cur_dir, subdirs, files in os.walk(path):
        subdirs.sort()
        if "spades.log" in files:
            out.append(cur_dir)
            subdirs[:] = []
    return out

def clean_spades_files(path):
    """Delete everything but the kept outputs in each SPAdes output directory.

    Returns the removed paths.
    """
    removed = []
    for assembly_dir in find_assembly_dirs(path):
        for fname in sorted(os.listdir(assembly_dir)):
            full_path = os.path.join(assembly_dir, fname)
            if os.path.isfile(full_path) and fname in KEEP_FILES:
                continue
            utils.remove_safe(full_path)
            if os.path.lexists(full_path):
                logger.warning("Could not remove %s" % full_path)
            else:
                removed.append(full_path)
    if removed:
        logger.info("Removed files and directories:")
        for fname in removed:
            logger.info(fname)
    else:
        logger.info("No SPAdes intermediate files found in %s" % path)
    return removed
