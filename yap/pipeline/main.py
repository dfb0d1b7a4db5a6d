"""Command line entry points for read cleaning and assembly batches.

Subcommands:

  check      report fastp and SPAdes availability
  new        generate a QC input file from a directory of raw reads
  qc         clean reads with fastp using a QC input file
  assembly   assemble cleaned reads with SPAdes (auto, conf, clean)
"""
import argparse
import time

from yap import utils
from yap.assembly import cleaner, spades
from yap.log import logger, setup_local_logging
from yap.pipeline import config_utils, run_info, runner, version
from yap.provenance import programs
from yap.qc import adapters, fastp
from yap.workflow import template

def _add_config_arg(parser):
    parser.add_argument("--config", help="YAML system configuration (defaults to ./yap_system.yaml if present)")

def _add_run_args(parser, threads=True):
    parser.add_argument("-o", "--output", help="Output directory")
    parser.add_argument("--dry", dest="dryrun", action="store_true", default=False,
                        help="Check that the correct files are detected without running anything")
    parser.add_argument("--opts", help="Optional parameters passed verbatim to the tool, e.g. --opts=\"--cut_front\"")
    if threads:
        parser.add_argument("-t", "--threads", type=int, help="Number of threads for the tool")
    _add_config_arg(parser)

def _add_new_subparser(subparsers):
    parser = subparsers.add_parser("new", help="Find sequences and generate input files")
    parser.add_argument("-d", "--dir", default="raw_reads", help="Input directory")
    parser.add_argument("-l", "--len", dest="word_len", type=int, default=3, help="Word lengths for sample ids")
    parser.add_argument("-s", "--sep", default="_", help="Separator type")
    parser.add_argument("--csv", action="store_true", default=False, help="Save as csv")

def _add_qc_subparser(subparsers):
    parser = subparsers.add_parser("qc", help="Trim adapters and clean low quality reads using fastp")
    parser.add_argument("-i", "--input", default="yap-qc_input.conf", help="Input config file")
    parser.add_argument("--id", dest="id_is_substring", action="store_true", default=False,
                        help="Sample ids match anywhere in the file names instead of the start")
    parser.add_argument("--rename", action="store_true", default=False, help="Rename output files")
    parser.add_argument("--skip-missing", action="store_true", default=False,
                        help="Skip samples with missing or ambiguous read files instead of stopping")
    _add_run_args(parser)

def _add_assembly_subparser(subparsers):
    parser = subparsers.add_parser("assembly", help="Assemble reads using SPAdes")
    asub = parser.add_subparsers(dest="assembly_cmd")
    asub.required = True
    auto = asub.add_parser("auto", help="Auto find clean reads and assemble them")
    auto.add_argument("-d", "--dir", default=fastp.DEFAULT_OUT_ROOT, help="Directory to search for clean reads")
    auto.add_argument("-s", "--specify", default="trimmed", help="Clean read directory names")
    _add_run_args(auto)
    conf = asub.add_parser("conf", help="Run SPAdes using a config file")
    conf.add_argument("-i", "--input", required=True, help="Input config file")
    _add_run_args(conf)
    clean = asub.add_parser("clean", help="Clean unused SPAdes files")
    clean.add_argument("-d", "--dir", required=True, help="Directory to clean")

def parse_cl_args(in_args):
    parser = argparse.ArgumentParser(
        description="Batch adapter trimming with fastp and de novo assembly with SPAdes.")
    parser.add_argument("-v", "--version", action="version",
                        version="%(prog)s " + version.__version__)
    parser.add_argument("--log-dir", default=None, help="Directory for log files (default: current directory)")
    subparsers = parser.add_subparsers(dest="cmd")
    subparsers.required = True
    programs.add_subparser(subparsers)
    _add_new_subparser(subparsers)
    _add_qc_subparser(subparsers)
    _add_assembly_subparser(subparsers)
    return parser.parse_args(in_args)

def _load_config(args, tool_name=None):
    config = config_utils.load_system_config(getattr(args, "config", None))
    if args.log_dir is not None:
        config["log_dir"] = args.log_dir
    if tool_name:
        config = config_utils.update_resources(config, tool_name, getattr(args, "opts", None),
                                               getattr(args, "threads", None))
    return config

def print_dry_run(samples, rename=False):
    logger.info("Total samples: %s" % len(samples))
    for x in samples:
        logger.info("%-18s: %s" % ("ID", x.id))
        logger.info("%-18s: %s" % ("Read 1", x.read_1))
        logger.info("%-18s: %s" % ("Read 2", x.read_2))
        if x.singleton:
            logger.info("%-18s: %s" % ("Singleton", x.singleton))
        for label, value in adapters.describe(x.adapter):
            logger.info("%-18s: %s" % (label, value))
        logger.info("%-18s: %s" % ("Target dir", x.target_dir))
        if rename:
            logger.info("%-18s: %s" % ("Target fname", x.output_name))
        logger.info("")

def _exit_status(outcomes):
    return 1 if any(isinstance(x, runner.Failure) for x in outcomes) else 0

def run_qc(args, config):
    samples = run_info.parse_qc_config(args.input, args.id_is_substring, args.rename,
                                       skip_missing=args.skip_missing)
    if args.dryrun:
        print_dry_run(samples, args.rename)
        return 0
    logger.info("Starting yap-qc v%s..." % version.__version__)
    tool = fastp.Fastp(args.output or fastp.DEFAULT_OUT_ROOT, config)
    return _exit_status(runner.run_batch(tool, samples))

def run_assembly(args, config):
    if args.assembly_cmd == "clean":
        cleaner.clean_spades_files(args.dir)
        return 0
    if args.assembly_cmd == "auto":
        samples = run_info.auto_find_assembly_samples(args.dir, args.specify)
    else:
        samples = run_info.find_assembly_samples(args.input)
    if args.dryrun:
        print_dry_run(samples)
        return 0
    logger.info("Starting yap-assembly v%s..." % version.__version__)
    tool = spades.Spades(args.output or spades.DEFAULT_OUT_ROOT, config)
    return _exit_status(runner.run_batch(tool, samples))

def run_main(args):
    """Dispatch a parsed command line, returning the process exit status.
    """
    tool_name = {"qc": "fastp", "assembly": "spades"}.get(args.cmd)
    config = _load_config(args, tool_name)
    handler = setup_local_logging(config)
    start = time.time()
    try:
        if args.cmd == "check":
            status = 1 if programs.check_dependencies(config) else 0
        elif args.cmd == "new":
            template.setup(args.dir, args.word_len, args.sep, args.csv)
            status = 0
        elif args.cmd == "qc":
            status = run_qc(args, config)
        else:
            status = run_assembly(args, config)
        logger.info("Execution time (HH:MM:SS): %s" % utils.format_duration(time.time() - start))
    except (ValueError, IOError) as e:
        logger.error(str(e))
        raise
    finally:
        handler.pop_application()
        handler.close()
    return status
