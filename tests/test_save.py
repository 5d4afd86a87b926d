import os
import pytest
import ttsync

from conftest import sample_document


def test_load(save_file):

    loaded = ttsync.save.load(save_file)

    assert loaded.path == save_file
    assert loaded.name == 'Unit Test'
    assert loaded.script == "print('global')"
    assert loaded.ui == ''
    assert len(loaded.objects) == 3

    first = loaded.objects[0]
    assert first.guid == 'A1B2C3'
    assert first.nickname == 'Ace'
    assert first.name == 'Card'
    assert first.script == ''
    assert first.ui == ''
    assert list(first.tags) == []
    assert first.valid_script_tag() is None

    second = loaded.find('D4E5F6')
    assert second.script == 'old bar'
    assert str(second.valid_script_tag()) == 'lua/scripts/bar.lua'
    assert second.valid_ui_tag() is None


def test_round_trip(save_file):
    """ Loading and writing back without changes has to preserve everything,
        including fields ttsync knows nothing about and the order of keys.
    """

    loaded = ttsync.save.load(save_file)
    loaded.write()

    reloaded = ttsync.save.load(save_file)
    assert reloaded.document == sample_document()
    assert list(reloaded.document.keys()) == list(sample_document().keys())

    for before, after in zip(loaded.objects, reloaded.objects):
        assert before.guid == after.guid
        assert before.tags == after.tags
        assert before.script == after.script
        assert before.ui == after.ui

    assert reloaded.objects[0].state['Transform'] == {'posX': 1.5, 'posY': 0.0, 'posZ': -2.25}


def test_write_format(save_file, tmp_path):

    loaded = ttsync.save.load(save_file)

    target = str(tmp_path / 'written.json')
    loaded.write(target)

    written = open(target, 'r').read()
    assert written.startswith('{\n  "SaveName": "Unit Test",\n')
    assert written.endswith('}\n')

    # No temporary files are left behind.
    assert sorted(os.listdir(str(tmp_path / 'saves'))) == ['TS_Save_1.json']
    assert 'written.json' in os.listdir(str(tmp_path))
    assert len(os.listdir(str(tmp_path))) == 2


def test_write_failure(save_file, monkeypatch):
    """ A failed write closes and removes the temporary file, and leaves the
        save on disk as it was.
    """

    before = open(save_file, 'rb').read()
    opened = list()

    class Full:

        def __init__(self, path, mode):
            self.writer = open(path, mode)
            opened.append(self)

        def __enter__(self):
            return self

        def __exit__(self, *exception):
            self.writer.close()

        def write(self, data):
            raise OSError(28, 'No space left on device')

    loaded = ttsync.save.load(save_file)
    loaded.set_body(ttsync.tags.SCRIPT, 'changed')

    monkeypatch.setattr(ttsync.save, 'open', Full, raising=False)

    with pytest.raises(ttsync.errors.FileFailure) as raised:
        loaded.write()

    assert raised.value.path == save_file
    assert len(opened) == 1
    assert opened[0].writer.closed == True

    assert os.listdir(os.path.dirname(save_file)) == ['TS_Save_1.json']
    assert open(save_file, 'rb').read() == before


def test_absent_keys(save_file):

    loaded = ttsync.save.load(save_file)
    first = loaded.objects[0]

    first.script = ''
    first.ui = ''
    first.tags = ttsync.tags.Tags()

    assert 'LuaScript' not in first.state
    assert 'XmlUI' not in first.state
    assert 'Tags' not in first.state

    first.script = 'print(1)'
    assert first.state['LuaScript'] == 'print(1)'

    first.script = ''
    assert first.state['LuaScript'] == ''

    # The top-level UI key was present, and stays present.
    loaded.ui = ''
    assert loaded.document['XmlUI'] == ''


def test_replace_tag(save_file):

    loaded = ttsync.save.load(save_file)
    second = loaded.find('D4E5F6')

    second.replace_tag(ttsync.tags.parse('lua/scripts/other.lua'))
    assert second.state['Tags'] == ['Foreign', 'lua/scripts/other.lua']


def test_copy(save_file):

    loaded = ttsync.save.load(save_file)
    copied = loaded.copy()

    copied.objects[0].script = 'changed'
    copied.script = 'changed'

    assert loaded.objects[0].script == ''
    assert loaded.script == "print('global')"
    assert copied.path == loaded.path


def test_select(save_file):

    loaded = ttsync.save.load(save_file)

    everything = loaded.select()
    assert list(target.guid for target in everything) == ['A1B2C3', 'D4E5F6', '0a0b0c']

    selected = loaded.select(['0a0b0c', 'A1B2C3', '0a0b0c'])
    assert list(target.guid for target in selected) == ['0a0b0c', 'A1B2C3']

    with pytest.raises(ttsync.errors.UnknownObject) as raised:
        loaded.select(['A1B2C3', 'FFFFFF'])

    assert raised.value.guid == 'FFFFFF'
    assert 'FFFFFF' in str(raised.value)


def test_script_states(save_file):

    loaded = ttsync.save.load(save_file)
    states = loaded.script_states()

    assert len(states) == 4
    assert states[0] == {'guid': '-1', 'script': "print('global')", 'ui': ''}
    assert states[1] == {'guid': 'A1B2C3', 'script': '', 'ui': ''}
    assert states[2] == {'guid': 'D4E5F6', 'script': 'old bar', 'ui': ''}


def test_load_failures(tmp_path):

    with pytest.raises(ttsync.errors.FileFailure):
        ttsync.save.load(str(tmp_path / 'missing.json'))

    broken = tmp_path / 'broken.json'
    broken.write_text('{"SaveName": ')

    with pytest.raises(ttsync.errors.FileFailure):
        ttsync.save.load(str(broken))

    wrong = tmp_path / 'wrong.json'
    wrong.write_text('[1, 2, 3]')

    with pytest.raises(ttsync.errors.FileFailure):
        ttsync.save.load(str(wrong))

    wrong.write_text('{"ObjectStates": {"GUID": "A1B2C3"}}')

    with pytest.raises(ttsync.errors.FileFailure):
        ttsync.save.load(str(wrong))


def test_ambiguous(save_file):

    loaded = ttsync.save.load(save_file)
    first = loaded.objects[0]
    first.tags = ttsync.tags.Tags(['xml/a.xml', 'xml/b.xml'])

    assert first.valid_script_tag() is None

    with pytest.raises(ttsync.errors.AmbiguousTag) as raised:
        first.valid_ui_tag()

    assert raised.value.guid == 'A1B2C3'
    assert raised.value.namespace == 'ui'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
