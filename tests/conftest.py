import logging
import os
import pytest
import socket
import threading

import ttsync


def free_port():
    """ Return a localhost port that nothing is listening on right now. """

    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(('127.0.0.1', 0))
    port = probe.getsockname()[1]
    probe.close()
    return port



class FakeHost:
    """ A stand-in for the host application. Every outbound message is
        recorded in *received*; the *responders* map a discriminant to a
        function returning the list of answers to send back, each one
        either a dictionary or raw bytes. Answers go to *target*, the port
        the Host under test is listening on.
    """

    def __init__(self):

        self.socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.socket.bind(('127.0.0.1', 0))
        self.socket.listen()
        self.socket.settimeout(0.1)
        self.port = self.socket.getsockname()[1]

        self.target = None
        self.save_path = None
        self.received = list()
        self.condition = threading.Condition()

        self.responders = dict()
        self.responders[0] = self.get_scripts
        self.responders[1] = self.reload
        self.responders[3] = self.execute

        self.shutdown = False
        self.thread = threading.Thread(target=self.run)
        self.thread.daemon = True
        self.thread.start()


    def close(self):
        self.shutdown = True
        self.thread.join()
        self.socket.close()


    def get_scripts(self, document):
        answer = dict()
        answer['messageID'] = 1
        answer['savePath'] = self.save_path
        answer['scriptStates'] = list()
        return [answer]


    def reload(self, document):
        answer = dict()
        answer['messageID'] = 1
        answer['savePath'] = self.save_path
        answer['scriptStates'] = document['scriptStates']
        return [answer]


    def execute(self, document):
        answer = dict()
        answer['messageID'] = 5
        answer['returnID'] = document['returnID']
        answer['returnValue'] = '"ok"'
        return [answer]


    def notify(self, answer):
        """ Send *answer* to the Host under test on its own connection. """

        if isinstance(answer, bytes):
            encoded = answer
        else:
            encoded = ttsync.json.dumps(answer)

        connection = socket.create_connection(('127.0.0.1', self.target))
        connection.sendall(encoded)
        connection.close()


    def messages(self, discriminant):
        """ Return every received message with *discriminant*. """

        self.condition.acquire()
        found = list(document for document in self.received if document['messageID'] == discriminant)
        self.condition.release()

        return found


    def wait_for(self, count, timeout=5):
        """ Block until at least *count* messages have been received. """

        self.condition.acquire()
        result = self.condition.wait_for(lambda: len(self.received) >= count, timeout)
        self.condition.release()

        return result


    def run(self):

        while self.shutdown == False:
            try:
                connection, remote = self.socket.accept()
            except socket.timeout:
                continue

            chunks = list()
            while True:
                chunk = connection.recv(65536)
                if chunk == b'':
                    break
                chunks.append(chunk)
            connection.close()

            document = ttsync.json.loads(b''.join(chunks))

            self.condition.acquire()
            self.received.append(document)
            self.condition.notify_all()
            self.condition.release()

            try:
                responder = self.responders[document['messageID']]
            except KeyError:
                continue

            for answer in responder(document):
                self.notify(answer)


# end of class FakeHost



def sample_document():

    document = dict()
    document['SaveName'] = 'Unit Test'
    document['GameMode'] = 'Unit Test'
    document['Date'] = '10/19/2026 9:00:00 AM'
    document['LuaScript'] = "print('global')"
    document['XmlUI'] = ''
    document['ObjectStates'] = list()

    first = dict()
    first['GUID'] = 'A1B2C3'
    first['Name'] = 'Card'
    first['Nickname'] = 'Ace'
    first['Transform'] = {'posX': 1.5, 'posY': 0.0, 'posZ': -2.25}
    document['ObjectStates'].append(first)

    second = dict()
    second['GUID'] = 'D4E5F6'
    second['Name'] = 'Custom_Model'
    second['Nickname'] = ''
    second['LuaScript'] = 'old bar'
    second['Tags'] = ['lua/scripts/bar.lua', 'Foreign']
    document['ObjectStates'].append(second)

    third = dict()
    third['GUID'] = '0a0b0c'
    third['Name'] = 'Bag'
    third['LuaScript'] = 'old bar'
    third['Tags'] = ['lua/scripts/bar.lua']
    document['ObjectStates'].append(third)

    return document



def write_file(root, relative, contents):
    """ Create the file *relative* under *root* with *contents*. """

    path = os.path.join(str(root), *relative.split('/'))
    os.makedirs(os.path.dirname(path), exist_ok=True)

    writer = open(path, 'w', encoding='utf-8', newline='')
    writer.write(contents)
    writer.close()

    return path



@pytest.fixture(autouse=True)
def reset_logging():

    yield

    logger = logging.getLogger('ttsync')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def save_file(tmp_path):

    path = tmp_path / 'saves' / 'TS_Save_1.json'
    path.parent.mkdir()
    path.write_bytes(ttsync.json.dumps_pretty(sample_document()))

    return str(path)


@pytest.fixture
def fake_host(save_file):

    fake = FakeHost()
    fake.save_path = save_file

    yield fake

    fake.close()


@pytest.fixture
def configuration(tmp_path, fake_host):

    root = tmp_path / 'project'
    root.mkdir()

    return ttsync.config.Configuration(root=str(root), host_port=fake_host.port, listen_port=0, debounce=0.1)


@pytest.fixture
def connection(configuration, fake_host):

    host = ttsync.Host(configuration)
    fake_host.target = host.server.port

    yield host

    host.close()


@pytest.fixture
def reconciler(connection, configuration):
    return ttsync.Reconciler(connection, configuration)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
