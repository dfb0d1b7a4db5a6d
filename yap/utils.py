"""Helpful utilities for running read cleaning and assembly batches.
"""
import os
import shutil
import time

SYMLINK_SUPPORTED = hasattr(os, "symlink") and os.name != "nt"

def safe_makedir(dname):
    """Make a directory if it doesn't exist, handling concurrent race conditions.
    """
    if not dname:
        return dname
    num_tries = 0
    max_tries = 5
    while not os.path.exists(dname):
        # we could get an error here if another process is creating
        # the directory at the same time.
        try:
            os.makedirs(dname)
        except OSError:
            if num_tries > max_tries:
                raise
            num_tries += 1
            time.sleep(2)
    return dname

def remove_safe(f):
    try:
        if os.path.isdir(f):
            shutil.rmtree(f)
        else:
            os.remove(f)
    except OSError:
        pass

def move_plus(origin, target):
    """Move a file into place, creating the target directory.

    Unlike a plain rename this fails loudly when the origin is missing.
    """
    if not os.path.exists(origin):
        raise IOError("File not found: %s" % origin)
    safe_makedir(os.path.dirname(os.path.abspath(target)))
    shutil.move(origin, target)
    return target

def symlink_plus(orig, new):
    """Create a symlink at `new` pointing to the canonical path of `orig`.

    Replaces stale links left over from a previous run.
    """
    orig = os.path.realpath(orig)
    if not os.path.exists(orig):
        raise IOError("File not found: %s" % orig)
    safe_makedir(os.path.dirname(os.path.abspath(new)))
    if os.path.lexists(new):
        os.remove(new)
    os.symlink(orig, new)
    return new

def which(program, env=None):
    """ returns the path to an executable or None if it can't be found"""
    if env is None:
        env = os.environ.copy()

    def is_exe(fpath):
        return os.path.isfile(fpath) and os.access(fpath, os.X_OK)

    fpath, fname = os.path.split(program)
    if fpath:
        if is_exe(program):
            return program
    else:
        for path in env.get("PATH", "").split(os.pathsep):
            exe_file = os.path.join(path, program)
            if is_exe(exe_file):
                return exe_file
    return None

def format_duration(seconds):
    """Format elapsed seconds as HH:MM:SS.
    """
    seconds = int(seconds)
    return "%02d:%02d:%02d" % (seconds // 3600, (seconds // 60) % 60, seconds % 60)
