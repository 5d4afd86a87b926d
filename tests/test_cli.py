import functools
import os
import pytest
import ttsync

from conftest import FakeHost, free_port, write_file
from ttsync import cli


def test_parser(tmp_path, monkeypatch):

    monkeypatch.chdir(str(tmp_path))
    write_file(str(tmp_path), 'scripts/foo.lua', '')

    parser = cli.parser()

    arguments = parser.parse_args(['attach', 'scripts/foo.lua', 'A1B2C3', '0a0b0c'])
    assert arguments.command == 'attach'
    assert arguments.path == 'scripts/foo.lua'
    assert arguments.guids == ['A1B2C3', '0a0b0c']
    assert arguments.verbose == 0

    arguments = parser.parse_args(['-v', 'reload', '--id', 'A1B2C3'])
    assert arguments.paths == []
    assert arguments.guid == 'A1B2C3'
    assert arguments.verbose == 1

    arguments = parser.parse_args(['watch', 'scripts'])
    assert arguments.paths == ['scripts']

    arguments = parser.parse_args(['backup', 'copy.json'])
    assert arguments.path == 'copy.json'

    arguments = parser.parse_args(['detach'])
    assert arguments.guids == []


def test_parser_validation(tmp_path, monkeypatch):

    monkeypatch.chdir(str(tmp_path))
    write_file(str(tmp_path), 'scripts/foo.lua', '')

    parser = cli.parser()

    invalid = (
        [],
        ['attach', 'scripts/missing.lua'],
        ['attach', 'scripts'],
        ['attach', 'scripts/foo.lua', 'A1B2'],
        ['attach', 'scripts/foo.lua', 'A1B2C3D4'],
        ['detach', 'A1-2C3'],
        ['reload', 'missing'],
        ['reload', '--id', 'nope'],
        ['watch', 'missing'],
        ['backup', 'copy.txt'],
        ['unknown'],
    )

    for argv in invalid:
        with pytest.raises(SystemExit):
            parser.parse_args(argv)


def test_main_reports_errors(tmp_path, monkeypatch, capsys):
    """ Any failure is a single line on standard error and a non-zero exit.
    """

    monkeypatch.chdir(str(tmp_path))

    configuration = functools.partial(ttsync.config.Configuration, host_port=free_port(), listen_port=0)
    monkeypatch.setattr(cli.config, 'Configuration', configuration)

    assert cli.main(['backup', 'copy.json']) == 1

    captured = capsys.readouterr()
    assert captured.err.startswith('error: ')
    assert 'is it running' in captured.err
    assert len(captured.err.splitlines()) == 1
    assert not os.path.exists(str(tmp_path / 'copy.json'))


def test_main_attach(tmp_path, monkeypatch, capsys, save_file):

    project = tmp_path / 'project'
    project.mkdir()
    monkeypatch.chdir(str(project))
    write_file(str(project), 'scripts/foo.lua', 'print("foo")')

    fake = FakeHost()
    fake.save_path = save_file
    fake.target = free_port()

    configuration = functools.partial(ttsync.config.Configuration, host_port=fake.port, listen_port=fake.target)
    monkeypatch.setattr(cli.config, 'Configuration', configuration)

    try:
        assert cli.main(['attach', 'scripts/foo.lua', 'A1B2C3']) == 0
    finally:
        fake.close()

    target = ttsync.save.load(save_file).find('A1B2C3')
    assert list(target.tags) == ['lua/scripts/foo.lua']
    assert target.script == 'print("foo")'
    assert len(fake.messages(1)) == 1

    captured = capsys.readouterr()
    assert "info: added: 'lua/scripts/foo.lua' as a tag to A1B2C3 (Ace)" in captured.out
    assert 'info: reloaded save' in captured.out
    assert captured.err == ''


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
