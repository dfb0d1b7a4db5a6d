"""Run an external tool over resolved samples and reconcile its outputs.

Each sample moves through the same states:

    compute output paths -> invoke -> classify
        success -> reconcile artifacts -> done
        failure -> report captured output -> stop

and produces exactly one outcome. A failed sample never stops the batch and
is never retried.
"""
import collections
import functools
import os
import shlex

from yap.distributed import serial
from yap.log import logger, logger_stdout
from yap.provenance import do

Success = collections.namedtuple("Success", ["sample_id", "report_paths"])
Failure = collections.namedtuple("Failure", ["sample_id", "exit_status", "captured_output", "reason"])

HEADER_WIDTH = 80

class ArtifactReconciliationFailure(OSError):
    def __init__(self, sample_id, path, reason):
        self.sample_id = sample_id
        self.path = path
        super(ArtifactReconciliationFailure, self).__init__(
            "Could not reconcile outputs for %s at %s: %s" % (sample_id, path, reason))

class Tool(object):
    """Interface for external tools driven by the runner.
    """
    name = None

    def output_paths(self, sample):
        """Compute and create per-sample output locations."""
        raise NotImplementedError

    def command(self, sample, outputs):
        """Argument vector for one sample."""
        raise NotImplementedError

    def primary_artifacts(self, outputs):
        """Files that must exist after a successful run."""
        raise NotImplementedError

    def reconcile(self, sample, outputs, result):
        """Move and link outputs into place, returning report paths."""
        raise NotImplementedError

    def settings(self, sample, outputs):
        return []

    def workdir(self, outputs):
        return None

def split_params(params):
    """Split user supplied tool parameters into arguments.

    Quoted multi-word values stay together, and a single value passes through
    as one opaque argument.
    """
    if not params:
        return []
    if isinstance(params, (list, tuple)):
        return [str(x) for x in params]
    params = params.strip()
    if params.startswith("params="):
        params = params[len("params="):].strip()
    args = shlex.split(params)
    if len(args) == 1:
        return [args[0]]
    return args

def header(sample_id):
    text = "Processing %s" % sample_id
    if len(text) + 2 >= HEADER_WIDTH:
        return text
    sym = "=" * ((HEADER_WIDTH - len(text) - 2) // 2)
    return ("%s %s %s" % (sym, text, sym)).ljust(HEADER_WIDTH, "=")

def remove_stale_artifacts(artifacts):
    """Delete primary artifacts left by a previous run so only fresh output counts.
    """
    for fname in artifacts:
        if os.path.lexists(fname):
            logger.warning("Removing output from a previous run: %s" % fname)
            os.remove(fname)

def _report_failure(tool, sample, exit_status, output, reason):
    logger.error("%s failed for %s: %s" % (tool.name, sample.id, reason))
    if output:
        logger_stdout.info(output.rstrip())
    logger.error("Please check the %s output above for details." % tool.name)
    return Failure(sample.id, exit_status, output, reason)

def run_sample(tool, sample):
    """Process a single sample with a tool, returning a Success or Failure outcome.
    """
    logger.info(header(sample.id))
    try:
        outputs = tool.output_paths(sample)
    except OSError as e:
        return _report_failure(tool, sample, None, "", "Could not create output directories: %s" % e)
    for label, value in tool.settings(sample, outputs):
        logger.info("%-18s: %s" % (label, value))
    artifacts = tool.primary_artifacts(outputs)
    try:
        remove_stale_artifacts(artifacts)
    except OSError as e:
        return _report_failure(tool, sample, None, "", "Could not remove output from a previous run: %s" % e)
    checks = [do.file_exists(x) for x in artifacts]
    try:
        result = do.run(tool.command(sample, outputs), "Running %s: %s" % (tool.name, sample.id),
                        checks=checks, cwd=tool.workdir(outputs))
    except do.ToolInvocationFailure as e:
        return _report_failure(tool, sample, e.returncode, e.captured_output, e.reason)
    try:
        report_paths = tool.reconcile(sample, outputs, result)
    except OSError as e:
        if not isinstance(e, ArtifactReconciliationFailure):
            e = ArtifactReconciliationFailure(sample.id, getattr(e, "filename", None), e)
        return _report_failure(tool, sample, result.returncode, "", str(e))
    logger.info("%s finished for %s" % (tool.name, sample.id))
    for i, fname in enumerate(report_paths):
        logger.info("%s. %s" % (i + 1, fname))
    return Success(sample.id, report_paths)

def run_batch(tool, samples):
    """Run a tool over all samples, strictly one at a time in input order.
    """
    logger.info("Total samples: %s" % len(samples))
    run_serial = serial.runner()
    fn = functools.partial(run_sample, tool)
    fn.__name__ = tool.name
    outcomes = run_serial(fn, samples)
    failed = [x.sample_id for x in outcomes if isinstance(x, Failure)]
    logger.info("%s finished: %s succeeded, %s failed" % (tool.name, len(outcomes) - len(failed), len(failed)))
    if failed:
        logger.warning("Failed samples: %s" % ", ".join(failed))
    return outcomes
