def payloads(packets, event):
    """Payloads of every received packet named ``event`` (None when sent without data)."""
    return [pkt['args'][0] if pkt['args'] else None for pkt in packets if pkt['name'] == event]


def create_room(client, name='Alice'):
    client.emit('createRoom', {'playerName': name})
    created = payloads(client.get_received(), 'roomCreated')
    assert len(created) == 1
    return created[0]


def test_health_endpoint(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_data(as_text=True) == 'OK'


def test_create_room(sio_factory):
    host = sio_factory()
    created = create_room(host)

    assert len(created['roomId']) == 6
    assert list(created['players']) == [created['hostId']]
    assert created['players'][created['hostId']]['name'] == 'Alice'
    assert created['players'][created['hostId']]['score'] == 0


def test_join_room_notifies_everyone(sio_factory):
    host = sio_factory()
    guest = sio_factory()
    created = create_room(host)

    guest.emit('joinRoom', {'roomId': created['roomId'].lower(), 'playerName': 'Bob'})
    guest_packets = guest.get_received()
    joined = payloads(guest_packets, 'joinedRoom')
    assert len(joined) == 1
    assert joined[0]['success'] is True
    assert joined[0]['roomId'] == created['roomId']
    assert joined[0]['hostId'] == created['hostId']
    assert len(joined[0]['players']) == 2
    assert payloads(guest_packets, 'updatePlayers')

    host_updates = payloads(host.get_received(), 'updatePlayers')
    assert len(host_updates[-1]) == 2


def test_join_errors_go_to_the_joiner_only(sio_factory):
    host = sio_factory()
    guest = sio_factory()
    created = create_room(host)

    guest.emit('joinRoom', {'roomId': 'NOROOM', 'playerName': 'Bob'})
    assert payloads(guest.get_received(), 'joinError') == [{'message': 'Room does not exist.'}]

    guest.emit('joinRoom', {'roomId': created['roomId'], 'playerName': '   '})
    assert payloads(guest.get_received(), 'joinError') == [{'message': 'Player name is required.'}]
    assert host.get_received() == []


def test_start_game_needs_a_second_player(sio_factory):
    host = sio_factory()
    created = create_room(host)

    host.emit('startGame', created['roomId'])
    assert payloads(host.get_received(), 'gameError') == [
        {'message': 'At least 2 players are needed to start the game.'}
    ]


def test_actions_from_wrong_player_are_ignored(sio_factory):
    host = sio_factory()
    stranger = sio_factory()
    created = create_room(host)

    stranger.emit('makeGuess', {'roomId': created['roomId'], 'guess': 'Batman'})
    stranger.emit('skipTurn', {'roomId': created['roomId']})
    assert stranger.get_received() == []
    assert host.get_received() == []


def test_full_round_and_abort(sio_factory):
    host = sio_factory()
    guest = sio_factory()
    created = create_room(host)
    room_id = created['roomId']
    host_sid = created['hostId']

    guest.emit('joinRoom', {'roomId': room_id, 'playerName': 'Bob'})
    joined = payloads(guest.get_received(), 'joinedRoom')[0]
    guest_sid = next(pid for pid in joined['players'] if pid != host_sid)
    host.get_received()

    host.emit('startGame', {'roomId': room_id})
    host_prompt = payloads(host.get_received(), 'pickingStarted')
    guest_prompt = payloads(guest.get_received(), 'pickingStarted')
    assert host_prompt[0]['partnerName'] == 'Bob'
    assert guest_prompt[0]['partnerName'] == 'Alice'
    assert len(host_prompt[0]['choices']) == 6

    host.emit('submitCustomWord', {'roomId': room_id, 'customWord': 'Shrek', 'customHint': 'Ogre'})
    guest.emit('submitWord', {'roomId': room_id, 'word': 'Batman'})
    assert payloads(host.get_received(), 'wordSubmitted') == [None]
    assert payloads(guest.get_received(), 'wordSubmitted') == [None]

    host.emit('setReady', {'roomId': room_id})
    guest.emit('setReady', room_id)
    host_packets = host.get_received()
    guest.get_received()
    assert payloads(host_packets, 'allWordsSubmitted') == [None]
    turn = payloads(host_packets, 'turnChanged')[-1]
    assert turn['turnCount'] == 1
    assert turn['currentTurn'] in (host_sid, guest_sid)

    if turn['currentTurn'] == host_sid:
        holder, watcher, word = host, guest, 'batman'
    else:
        holder, watcher, word = guest, host, 'shrek'
    holder.emit('makeGuess', {'roomId': room_id, 'guess': word})
    guesses = payloads(watcher.get_received(), 'guessMade')
    assert guesses == [{'playerId': turn['currentTurn'], 'guess': word, 'isCorrect': True}]
    holder.get_received()

    guest.disconnect()
    assert payloads(host.get_received(), 'gameAborted') == [
        {'message': 'Not enough players to continue. The game has ended.'}
    ]
