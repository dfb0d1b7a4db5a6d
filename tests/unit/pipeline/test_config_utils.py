import mock
import pytest

from yap.pipeline import config_utils


@pytest.mark.parametrize('config,expected', [
    ({}, 'fastp'),
    ({'resources': {'fastp': '/opt/bin/fastp'}}, '/opt/bin/fastp'),
    ({'resources': {'fastp': {'cmd': '/opt/fastp-0.23/fastp'}}}, '/opt/fastp-0.23/fastp'),
    ({'resources': {'fastp': {'threads': 4}}}, 'fastp'),
])
def test_get_program(config, expected):
    assert config_utils.get_program('fastp', config) == expected


def test_get_program_default_spades():
    assert config_utils.get_program('spades', {}) == 'spades.py'


def test_get_program_check_missing(mocker):
    mocker.patch('yap.pipeline.config_utils.utils.which', return_value=None)
    with pytest.raises(config_utils.CmdNotFound):
        config_utils.get_program('fastp', {}, check=True)


def test_get_program_check_found(mocker):
    which = mocker.patch('yap.pipeline.config_utils.utils.which', return_value='/usr/bin/fastp')
    assert config_utils.get_program('fastp', {}, check=True) == '/usr/bin/fastp'
    which.assert_called_once_with('fastp')


@pytest.mark.parametrize('config,expected', [
    ({'resources': {'spades': {'threads': 8}}}, {'threads': 8}),
    ({'resources': {'default': {'threads': 2}}}, {'threads': 2}),
    ({'resources': {}}, {}),
    ({}, {}),
    ({'resources': {'spades': '/opt/SPAdes/bin/spades.py'}}, {'cmd': '/opt/SPAdes/bin/spades.py'}),
])
def test_get_resources(config, expected):
    assert config_utils.get_resources('spades', config) == expected


def test_update_resources_copies():
    config = {'resources': {'fastp': '/opt/fastp'}}
    out = config_utils.update_resources(config, 'fastp', options='--cut_front', threads='4')
    assert out['resources']['fastp'] == {'cmd': '/opt/fastp', 'options': '--cut_front', 'threads': 4}
    assert config == {'resources': {'fastp': '/opt/fastp'}}


def test_update_resources_keeps_config_values():
    config = {'resources': {'spades': {'options': '--isolate', 'threads': 16}}}
    out = config_utils.update_resources(config, 'spades')
    assert out['resources']['spades'] == {'options': '--isolate', 'threads': 16}


def test_load_config(tmpdir, monkeypatch):
    monkeypatch.setenv('YAP_TOOLS', '/opt/tools')
    config_file = tmpdir.join('yap_system.yaml')
    config_file.write('resources:\n'
                      '  FASTP:\n'
                      '    cmd: $YAP_TOOLS/fastp\n'
                      '  spades:\n'
                      '    threads: 8\n'
                      'log_dir: logs\n')
    config = config_utils.load_system_config(str(config_file))
    assert config['resources']['fastp'] == {'cmd': '/opt/tools/fastp'}
    assert config['resources']['spades'] == {'threads': 8}
    assert config['yap_system'] == str(config_file)
    assert config_utils.get_program('fastp', config) == '/opt/tools/fastp'


def test_load_config_empty_file(tmpdir):
    config_file = tmpdir.join('yap_system.yaml')
    config_file.write('')
    assert config_utils.load_config(str(config_file)) == {'resources': {}}


def test_load_config_not_mapping(tmpdir):
    config_file = tmpdir.join('yap_system.yaml')
    config_file.write('- fastp\n- spades\n')
    with pytest.raises(ValueError):
        config_utils.load_config(str(config_file))


def test_load_system_config_missing(tmpdir):
    missing = str(tmpdir.join('missing.yaml'))
    config = config_utils.load_system_config(missing)
    assert config == {'resources': {}, 'yap_system': None}
    with pytest.raises(ValueError):
        config_utils.load_system_config(missing, allow_missing=False)


def test_expand_path_non_string():
    assert config_utils.expand_path(4) == 4
    assert config_utils.expand_path(mock.sentinel.value) is mock.sentinel.value
