"""Centralize running of external commands, providing logging and tracking.
"""
import collections
import os
import subprocess

from yap.log import logger, logger_cl

CommandResult = collections.namedtuple("CommandResult", ["cmd", "returncode", "stdout", "stderr"])

class ToolInvocationFailure(Exception):
    """External command exited non-zero or did not produce its expected output.
    """
    def __init__(self, result, reason):
        self.result = result
        self.reason = reason
        super(ToolInvocationFailure, self).__init__(
            "%s: %s" % (reason, " ".join(result.cmd)))

    @property
    def returncode(self):
        return self.result.returncode

    @property
    def captured_output(self):
        return "".join(x for x in [self.result.stdout, self.result.stderr] if x)

def run(cmd, descr=None, checks=None, cwd=None, env=None):
    """Run the provided command, logging details and checking for errors.

    Waits for the command to finish, capturing stdout and stderr separately.
    Raises ToolInvocationFailure on a non-zero exit status or when any of the
    output `checks` fail; a zero exit status alone does not count as success.
    """
    if descr:
        logger.debug(descr)
    cmd = _normalize_cmd_args(cmd)
    logger_cl.debug(" ".join(cmd))
    try:
        result = _do_run(cmd, cwd=cwd, env=env)
    except OSError as e:
        raise ToolInvocationFailure(CommandResult(cmd, None, "", "%s\n" % e),
                                    "Could not execute %s" % cmd[0])
    if result.returncode != 0:
        raise ToolInvocationFailure(result, "Command exited with status %s" % result.returncode)
    for check in checks or []:
        if not check():
            raise ToolInvocationFailure(result, "Command finished without expected output")
    return result

def _normalize_cmd_args(cmd):
    """Commands are argument vectors, run without a shell.
    """
    if isinstance(cmd, str):
        raise ValueError("Expected a list of command arguments, got a string: %s" % cmd)
    return [str(x) for x in cmd]

def _do_run(cmd, cwd=None, env=None):
    s = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        close_fds=True,
        cwd=cwd,
        env=env,
    )
    stdout, stderr = s.communicate()
    return CommandResult(cmd, s.returncode,
                         stdout.decode("utf-8", errors="replace"),
                         stderr.decode("utf-8", errors="replace"))

# checks for validating run completed successfully

def file_exists(target_file):
    def check():
        ok = os.path.exists(target_file)
        if not ok:
            logger.info("Did not find output file {0}".format(target_file))
        return ok
    return check
