import json

ORC = {'name': 'Orc', 'hp': '20', 'mp': '4', 'pe': '5', 'entityType': 'foe', 'imgSource': 'orc.png'}


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_state_starts_empty(client):
    res = client.get('/api/state')
    assert res.status_code == 200
    assert res.get_json() == {'allies': [], 'foes': [], 'clocks': []}


def test_state_and_history_follow_socket_mutations(client, gm_client):
    gm_client.emit('add-entity', ORC, namespace='/ws', callback=True)

    state = client.get('/api/state').get_json()
    assert [e['name'] for e in state['foes']] == ['Orc']
    assert client.get('/api/history').get_json() == {'undo': 1, 'redo': 0, 'capacity': 10}

    gm_client.emit('undo', namespace='/ws', callback=True)
    assert client.get('/api/state').get_json()['foes'] == []
    assert client.get('/api/history').get_json() == {'undo': 0, 'redo': 1, 'capacity': 10}


def test_mutations_are_written_to_state_file(gm_client, state_file):
    gm_client.emit('add-entity', ORC, namespace='/ws', callback=True)
    with open(state_file, encoding='utf-8') as fh:
        saved = json.load(fh)
    assert saved['foes'][0]['imgSource'] == 'orc.png'


def test_saved_state_is_loaded_on_startup(state_file):
    from combat_sync import create_app

    entity = {
        'id': 'kept-1', 'name': 'Knight', 'conditions': '', 'imgSource': '',
        'healthPoints': {'currentValue': 5, 'maxValue': 10},
        'magicPoints': {'currentValue': 0, 'maxValue': 0},
        'equipmentPoints': {'currentValue': 1, 'maxValue': 1},
        'status': 'alive', 'statsVisibleByPlayers': True, 'turnDone': False,
    }
    with open(state_file, 'w', encoding='utf-8') as fh:
        json.dump({'allies': [entity], 'foes': [], 'clocks': []}, fh)

    class ReloadConfig:
        TESTING = True
        GM_SECRET = 'x'
        STATE_FILE = state_file
        HEARTBEAT_SEC = 0

    reloaded = create_app(ReloadConfig)
    res = reloaded.test_client().get('/api/state')
    assert res.get_json()['allies'] == [entity]


def test_state_reset_command(flask_app, gm_client, state_file):
    gm_client.emit('add-entity', ORC, namespace='/ws', callback=True)
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['state-reset'])
    assert result.exit_code == 0
    with open(state_file, encoding='utf-8') as fh:
        assert json.load(fh) == {'allies': [], 'foes': [], 'clocks': []}
