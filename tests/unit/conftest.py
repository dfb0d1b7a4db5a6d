"""Pytest fixtures and test helper functions"""
import os

import mock
import pytest

from yap.pipeline import run_info
from yap.provenance import do
from yap.qc import adapters

FASTQ = "@read1\nACGTACGT\n+\nIIIIIIII\n"


def touch(path, content=FASTQ):
    dname = os.path.dirname(path)
    if dname and not os.path.exists(dname):
        os.makedirs(dname)
    with open(path, "w") as out_handle:
        out_handle.write(content)
    return path


def write_config(path, rows, header="id,adapters"):
    with open(path, "w") as out_handle:
        out_handle.write("\n".join([header] + list(rows)) + "\n")
    return path


def make_sample(tmpdir, sample_id="sampleA", adapter=None, output_name=None, target_dir=None):
    raw_dir = str(tmpdir.mkdir("raw_%s" % sample_id))
    read_1 = touch(os.path.join(raw_dir, "%s_R1.fastq" % sample_id))
    read_2 = touch(os.path.join(raw_dir, "%s_R2.fastq" % sample_id))
    return run_info.SampleRecord(sample_id, read_1, read_2, None,
                                 adapter or adapters.AutoDetect(), output_name,
                                 target_dir or output_name or sample_id)


@pytest.fixture
def fake_run(mocker):
    """Replace subprocess execution, creating the expected output files.

    Set `fake_run.returncode` or `fake_run.create` to change the behaviour
    for a test. `create` receives the argv and working directory.
    """
    state = mock.Mock()
    state.returncode = 0
    state.create = None
    state.calls = []

    def _run(cmd, cwd=None, env=None):
        state.calls.append((cmd, cwd))
        returncode = state.returncode(cmd) if callable(state.returncode) else state.returncode
        if state.create is not None and returncode == 0:
            state.create(cmd, cwd)
        return do.CommandResult(cmd, returncode, "tool stdout\n", "tool stderr\n")

    mocker.patch("yap.provenance.do._do_run", side_effect=_run)
    yield state
