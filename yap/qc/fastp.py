"""Adapter trimming and read cleaning with fastp (https://github.com/OpenGene/fastp)

Output layout for each sample:

    <out_root>/<target_dir>/trimmed_reads/<read files, renamed if requested>
    <out_root>/<target_dir>/raw_read_symlinks/<original read files>
    <out_root>/<target_dir>/fastp_reports/report.html, report.json, report.log
"""
import collections
import os

from yap import utils
from yap.log import logger
from yap.pipeline import config_utils, runner
from yap.qc import adapters

DEFAULT_OUT_ROOT = "clean_reads"

FastpOutputs = collections.namedtuple("FastpOutputs", ["sample_dir", "out_r1", "out_r2"])

# fastp writes these in its working directory; they are moved into the reports dir
REPORT_FILES = [("fastp.html", "report.html"),
                ("fastp.json", "report.json"),
                ("fastp.log", "report.log")]

def rename_output(fname, sample):
    """Substitute the output name for the sample id in a file name.
    """
    if sample.output_name:
        return fname.replace(sample.id, sample.output_name)
    return fname

def adapter_args(adapter):
    if isinstance(adapter, adapters.Dual):
        return ["--adapter_sequence", adapter.i5, "--adapter_sequence_r2", adapter.i7]
    elif isinstance(adapter, adapters.Single):
        return ["--adapter_sequence", adapter.sequence]
    return []

class Fastp(runner.Tool):
    name = "fastp"

    def __init__(self, out_root=DEFAULT_OUT_ROOT, config=None):
        self.out_root = out_root
        self.config = config or {}
        self.resources = config_utils.get_resources("fastp", self.config)

    def output_paths(self, sample):
        sample_dir = os.path.abspath(os.path.join(self.out_root, sample.target_dir))
        out_dir = utils.safe_makedir(os.path.join(sample_dir, "trimmed_reads"))
        out_r1, out_r2 = [os.path.join(out_dir, rename_output(os.path.basename(x), sample))
                          for x in [sample.read_1, sample.read_2]]
        return FastpOutputs(sample_dir, out_r1, out_r2)

    def workdir(self, outputs):
        return outputs.sample_dir

    def command(self, sample, outputs):
        cmd = [config_utils.get_program("fastp", self.config),
               "-i", os.path.abspath(sample.read_1), "-I", os.path.abspath(sample.read_2),
               "-o", outputs.out_r1, "-O", outputs.out_r2]
        cmd += adapter_args(sample.adapter)
        cmd += runner.split_params(self.resources.get("options"))
        if self.resources.get("threads"):
            cmd += ["--thread", str(self.resources["threads"])]
        return cmd

    def primary_artifacts(self, outputs):
        return [outputs.out_r1, outputs.out_r2] + \
               [os.path.join(outputs.sample_dir, x) for x, _ in REPORT_FILES[:2]]

    def settings(self, sample, outputs):
        out = [("Target dir", outputs.sample_dir),
               ("Input dir", os.path.dirname(os.path.abspath(sample.read_1))),
               ("Input R1", os.path.basename(sample.read_1)),
               ("Input R2", os.path.basename(sample.read_2)),
               ("Output dir", os.path.dirname(outputs.out_r1)),
               ("Output R1", os.path.basename(outputs.out_r1)),
               ("Output R2", os.path.basename(outputs.out_r2))]
        return out + adapters.describe(sample.adapter)

    def reconcile(self, sample, outputs, result):
        # fastp reports progress on stderr; keep it as the run log
        with open(os.path.join(outputs.sample_dir, REPORT_FILES[2][0]), "w") as out_handle:
            out_handle.write(result.stderr)
        link_raw_reads(sample, outputs.sample_dir)
        return move_reports(sample, outputs.sample_dir)

def link_raw_reads(sample, sample_dir):
    """Symlink the canonical raw read files next to the cleaned output.
    """
    if not utils.SYMLINK_SUPPORTED:
        logger.warning("Skip creating symlinks in %s for %s and %s. Operating system is not supported." %
                       (sample_dir, sample.read_1, sample.read_2))
        return []
    symdir = os.path.join(sample_dir, "raw_read_symlinks")
    out = []
    for fname in [sample.read_1, sample.read_2]:
        link = os.path.join(symdir, os.path.basename(fname))
        try:
            out.append(utils.symlink_plus(fname, link))
        except OSError as e:
            raise runner.ArtifactReconciliationFailure(sample.id, link, e)
    return out

def move_reports(sample, sample_dir):
    """Move fastp reports into the per-sample reports directory.
    """
    report_dir = os.path.join(sample_dir, "fastp_reports")
    out = []
    for orig, new in REPORT_FILES:
        orig = os.path.join(sample_dir, orig)
        new = os.path.join(report_dir, new)
        if not os.path.exists(orig):
            raise runner.ArtifactReconciliationFailure(sample.id, orig, "missing fastp report")
        try:
            out.append(utils.move_plus(orig, new))
        except (IOError, OSError) as e:
            raise runner.ArtifactReconciliationFailure(sample.id, orig, e)
    return out
