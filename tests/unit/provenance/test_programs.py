import mock
import pytest

from yap.pipeline import config_utils
from yap.provenance import programs


def _popen(output):
    proc = mock.Mock()
    proc.communicate.return_value = (output, None)
    return proc


@pytest.mark.parametrize("name,output,expected", [
    ("fastp", b"fastp 0.23.4\n", "0.23.4"),
    ("spades", b"SPAdes genome assembler v3.15.5\n", "3.15.5"),
])
def test_get_cl_version(mocker, name, output, expected):
    mocker.patch("yap.provenance.programs.config_utils.get_program", return_value="/usr/bin/%s" % name)
    popen = mocker.patch("yap.provenance.programs.subprocess.Popen", return_value=_popen(output))
    prog = [p for p in programs._cl_progs if p["name"] == name][0]
    assert programs._get_cl_version(prog, {}) == expected
    assert popen.call_args[0][0] == ["/usr/bin/%s" % name, "--version"]


def test_missing_program(mocker):
    mocker.patch("yap.provenance.programs.config_utils.get_program",
                 side_effect=config_utils.CmdNotFound("fastp"))
    popen = mocker.patch("yap.provenance.programs.subprocess.Popen")
    assert programs.get_versions({}) == [("fastp", None), ("spades", None)]
    assert not popen.called


def test_check_dependencies(mocker):
    mocker.patch("yap.provenance.programs.get_versions",
                 return_value=[("fastp", "0.23.4"), ("spades", None)])
    assert programs.check_dependencies({}) == ["spades"]
