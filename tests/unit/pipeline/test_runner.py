import os

import pytest

from yap.pipeline import runner

from tests.unit.conftest import make_sample


class TouchTool(runner.Tool):
    """Minimal tool writing one output file per sample."""
    name = "touch"

    def __init__(self, out_dir):
        self.out_dir = out_dir
        self.reconciled = []

    def output_paths(self, sample):
        return os.path.join(self.out_dir, "%s.out" % sample.id)

    def command(self, sample, outputs):
        return ["touch", outputs]

    def primary_artifacts(self, outputs):
        return [outputs]

    def reconcile(self, sample, outputs, result):
        self.reconciled.append(sample.id)
        return [outputs]


def _create_output(cmd, cwd):
    if "sampleB" not in cmd[1]:
        open(cmd[1], "w").close()


@pytest.fixture
def samples(tmpdir):
    return [make_sample(tmpdir, x) for x in ["sampleA", "sampleB", "sampleC"]]


def test_batch_continues_after_failure(tmpdir, samples, fake_run):
    fake_run.returncode = lambda cmd: 1 if "sampleB" in cmd[1] else 0
    fake_run.create = _create_output
    tool = TouchTool(str(tmpdir))
    outcomes = runner.run_batch(tool, samples)
    assert [type(x) for x in outcomes] == [runner.Success, runner.Failure, runner.Success]
    assert [x.sample_id for x in outcomes] == ["sampleA", "sampleB", "sampleC"]
    assert outcomes[1].exit_status == 1
    assert outcomes[1].captured_output == "tool stdout\ntool stderr\n"
    assert [x[0][1] for x in fake_run.calls] == [os.path.join(str(tmpdir), "%s.out" % x)
                                                for x in ["sampleA", "sampleB", "sampleC"]]
    assert tool.reconciled == ["sampleA", "sampleC"]


def test_exit_zero_without_artifact_fails(tmpdir, samples, fake_run):
    fake_run.create = _create_output
    tool = TouchTool(str(tmpdir))
    outcome = runner.run_sample(tool, samples[1])
    assert isinstance(outcome, runner.Failure)
    assert outcome.exit_status == 0
    assert tool.reconciled == []


def test_launch_error_is_failure(tmpdir, samples, mocker):
    mocker.patch("yap.provenance.do._do_run", side_effect=OSError("No such file or directory"))
    outcome = runner.run_sample(TouchTool(str(tmpdir)), samples[0])
    assert isinstance(outcome, runner.Failure)
    assert outcome.exit_status is None
    assert "No such file" in outcome.captured_output


def test_output_dir_error_is_failure(tmpdir, samples, fake_run, mocker):
    tool = TouchTool(str(tmpdir))
    mocker.patch.object(tool, "output_paths", side_effect=OSError("Permission denied"))
    outcome = runner.run_sample(tool, samples[0])
    assert isinstance(outcome, runner.Failure)
    assert fake_run.calls == []


def test_reconcile_error_is_failure(tmpdir, samples, fake_run, mocker):
    fake_run.create = _create_output
    tool = TouchTool(str(tmpdir))
    mocker.patch.object(tool, "reconcile", side_effect=IOError(2, "File not found", "/x/report.html"))
    outcome = runner.run_sample(tool, samples[0])
    assert isinstance(outcome, runner.Failure)
    assert "/x/report.html" in outcome.reason


def test_empty_batch(tmpdir, fake_run):
    assert runner.run_batch(TouchTool(str(tmpdir)), []) == []
    assert fake_run.calls == []


@pytest.mark.parametrize("params,expected", [
    (None, []),
    ("", []),
    ("--cut_front", ["--cut_front"]),
    ("params=--cut_front --cut_tail", ["--cut_front", "--cut_tail"]),
    ("--adapter_fasta 'my adapters.fa'", ["--adapter_fasta", "my adapters.fa"]),
    (["--careful", 3], ["--careful", "3"]),
])
def test_split_params(params, expected):
    assert runner.split_params(params) == expected


def test_header_width():
    out = runner.header("sampleA")
    assert len(out) == runner.HEADER_WIDTH
    assert " Processing sampleA " in out


def test_stale_artifact_removed_before_run(tmpdir, samples, fake_run):
    stale = str(tmpdir.join("sampleB.out"))
    open(stale, "w").close()
    fake_run.create = _create_output
    outcome = runner.run_sample(TouchTool(str(tmpdir)), samples[1])
    assert isinstance(outcome, runner.Failure)
    assert outcome.exit_status == 0
    assert not os.path.exists(stale)


def test_stale_artifact_not_removable(tmpdir, samples, fake_run, mocker):
    mocker.patch("yap.pipeline.runner.remove_stale_artifacts", side_effect=OSError("Permission denied"))
    outcome = runner.run_sample(TouchTool(str(tmpdir)), samples[0])
    assert isinstance(outcome, runner.Failure)
    assert outcome.exit_status is None
    assert fake_run.calls == []
