"""De novo assembly of cleaned paired reads with SPAdes.

Assemblies go to <out_root>/<sample id>/ and each finished contig file is
linked from <out_root>/contig_symlinks/<sample id>_contigs.fasta.
"""
import collections
import os

from yap import utils
from yap.log import logger
from yap.pipeline import config_utils, runner

DEFAULT_OUT_ROOT = "assemblies"
DEFAULT_ARGS = ["--careful"]

SpadesOutputs = collections.namedtuple("SpadesOutputs", ["out_dir", "contigs", "symlink_dir"])

class Spades(runner.Tool):
    name = "SPAdes"

    def __init__(self, out_root=DEFAULT_OUT_ROOT, config=None):
        self.out_root = out_root
        self.config = config or {}
        self.resources = config_utils.get_resources("spades", self.config)

    def output_paths(self, sample):
        out_dir = os.path.abspath(os.path.join(self.out_root, sample.target_dir))
        symlink_dir = utils.safe_makedir(os.path.abspath(os.path.join(self.out_root, "contig_symlinks")))
        return SpadesOutputs(out_dir, os.path.join(out_dir, "contigs.fasta"), symlink_dir)

    def command(self, sample, outputs):
        cmd = [config_utils.get_program("spades", self.config),
               "--pe1-1", sample.read_1, "--pe1-2", sample.read_2,
               "-o", outputs.out_dir]
        cmd += runner.split_params(self.resources.get("options")) or list(DEFAULT_ARGS)
        if sample.singleton:
            cmd += ["--pe1-s", sample.singleton]
        if self.resources.get("threads"):
            cmd += ["--threads", str(self.resources["threads"])]
        return cmd

    def primary_artifacts(self, outputs):
        return [outputs.contigs]

    def settings(self, sample, outputs):
        out = [("ID", sample.id),
               ("Input R1", sample.read_1),
               ("Input R2", sample.read_2)]
        if sample.singleton:
            out.append(("Singleton", sample.singleton))
        out.append(("Output", outputs.out_dir))
        if self.resources.get("options"):
            out.append(("Opt params", " ".join(runner.split_params(self.resources["options"]))))
        return out

    def reconcile(self, sample, outputs, result):
        if not utils.SYMLINK_SUPPORTED:
            logger.warning("Skip creating contig symlink for %s. Operating system is not supported." %
                           sample.id)
            return [outputs.contigs]
        link = os.path.join(outputs.symlink_dir, "%s_contigs.fasta" % sample.id)
        try:
            utils.symlink_plus(outputs.contigs, link)
        except (IOError, OSError) as e:
            raise runner.ArtifactReconciliationFailure(sample.id, link, e)
        return [outputs.contigs, link]
