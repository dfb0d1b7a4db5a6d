"""Loads configurations from .yaml files and expands environment variables.
"""
import copy
import os

import toolz as tz
import yaml

from yap import utils

DEFAULT_CONFIG = "yap_system.yaml"

# executable names used when the configuration does not override them
DEFAULT_PROGRAMS = {"fastp": "fastp",
                    "spades": "spades.py"}

class CmdNotFound(Exception):
    pass

def load_system_config(config_file=None, allow_missing=True):
    """Load yap_system.yaml configuration file, handling standard defaults.

    Uses yap_system.yaml in the current directory when no file is given.
    """
    if config_file is None:
        config_file = DEFAULT_CONFIG
    if not os.path.exists(config_file):
        if allow_missing:
            config_file = None
        else:
            raise ValueError("Could not find input system configuration file %s" % config_file)
    config = load_config(config_file) if config_file else {"resources": {}}
    config["yap_system"] = config_file
    return config

def load_config(config_file):
    """Load YAML config file, replacing environmental variables.
    """
    with open(config_file) as in_handle:
        config = yaml.safe_load(in_handle) or {}
    if not isinstance(config, dict):
        raise ValueError("Expected a mapping at the top of configuration file %s" % config_file)
    config = _expand_paths(config)
    if config.get("resources") is None:
        config["resources"] = {}
    # lowercase resource names, the preferred way to specify
    newr = {}
    for k, v in config["resources"].items():
        if k.lower() != k:
            newr[k.lower()] = v
    config["resources"].update(newr)
    return config

def _expand_paths(config):
    for field, setting in config.items():
        if isinstance(config[field], dict):
            config[field] = _expand_paths(config[field])
        else:
            config[field] = expand_path(setting)
    return config

def expand_path(path):
    """ Combines os.path.expandvars with replacing ~ with $HOME.
    """
    try:
        return os.path.expandvars(path.replace("~", "$HOME"))
    except AttributeError:
        return path

def get_resources(name, config):
    """Retrieve resources for a program, pulling from multiple config sources.
    """
    resources = tz.get_in(["resources", name], config,
                          tz.get_in(["resources", "default"], config, {})) or {}
    if isinstance(resources, str):
        resources = {"cmd": resources}
    return resources

def get_program(name, config, default=None, check=False):
    """Retrieve the command used to run a program from the configuration.

    With `check`, the command must resolve to an executable on the PATH.
    """
    pconfig = tz.get_in(["resources", name], config)
    if isinstance(pconfig, str):
        program = pconfig
    elif pconfig and "cmd" in pconfig:
        program = pconfig["cmd"]
    else:
        program = default or DEFAULT_PROGRAMS.get(name, name)
    program = expand_path(program)
    if check:
        full_path = utils.which(program)
        if not full_path:
            raise CmdNotFound("Could not find %s (%s) on the PATH" % (program, name))
        return full_path
    return program

def update_resources(config, name, options=None, threads=None):
    """Return a copy of the configuration with command line overrides for a program.
    """
    config = copy.deepcopy(config)
    resources = config.setdefault("resources", {})
    pconfig = resources.get(name)
    if isinstance(pconfig, str):
        pconfig = {"cmd": pconfig}
    pconfig = dict(pconfig or {})
    if options:
        pconfig["options"] = options
    if threads:
        pconfig["threads"] = int(threads)
    resources[name] = pconfig
    return config
