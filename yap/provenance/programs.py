"""Identify external program versions, reporting missing dependencies.
"""
import subprocess

from yap.log import logger
from yap.pipeline import config_utils

_cl_progs = [{"name": "fastp", "args": "--version", "stdout_flag": "fastp"},
             {"name": "spades", "args": "--version", "stdout_flag": "SPAdes genome assembler"}]

def _parse_from_stdoutflag(stdout, x):
    for line in stdout:
        if line.find(x) >= 0:
            parts = [p for p in line[line.find(x) + len(x):].split() if p.strip()]
            if parts:
                return parts[0].strip()
    return ""

def _get_cl_version(p, config):
    """Retrieve version of a single commandline program, None if it is not installed.
    """
    try:
        prog = config_utils.get_program(p["name"], config, check=True)
    except config_utils.CmdNotFound:
        return None
    subp = subprocess.Popen([prog, p["args"]], stdout=subprocess.PIPE, stderr=subprocess.STDOUT)
    stdout, _ = subp.communicate()
    lines = [l.strip() for l in stdout.decode("utf-8", errors="replace").split("\n") if l.strip()]
    v = _parse_from_stdoutflag(lines, p["stdout_flag"]) if p.get("stdout_flag") else ""
    if not v and lines:
        v = lines[-1]
    if v.endswith("."):
        v = v[:-1]
    return v.lstrip("v")

def get_versions(config=None):
    """Versions of required programs as (name, version) pairs, version None when missing.
    """
    config = config or {}
    return [(p["name"], _get_cl_version(p, config)) for p in _cl_progs]

def check_dependencies(config=None):
    """Log dependency status, returning the names of missing programs.
    """
    logger.info("Dependencies:")
    missing = []
    for name, version in get_versions(config):
        if version is None:
            logger.info("%-18s: [NOT FOUND]" % name)
            missing.append(name)
        else:
            logger.info("%-18s: [OK] %s" % (name, version))
    return missing

def add_subparser(subparsers):
    """Add command line option for checking external dependencies.
    """
    parser = subparsers.add_parser("check", help="Check fastp and SPAdes are installed")
    parser.add_argument("--config", help="YAML system configuration with program locations")
    return parser
