from combat_sync.sessions import SessionRegistry

SECRET = 'gm-secret'


def test_empty_configured_secret_authorizes_nobody():
    sessions = SessionRegistry('')
    assert not sessions.is_authorized('')
    assert not sessions.is_authorized('anything')
    sessions.connect('sid-1')
    assert sessions.login('sid-1', '') is False
    assert sessions.resolve_caller_secret('sid-1') == ''


def test_login_upgrades_only_with_matching_secret():
    sessions = SessionRegistry(SECRET)
    sessions.connect('sid-1')
    assert sessions.resolve_caller_secret('sid-1') == ''
    assert sessions.login('sid-1', 'nope') is False
    assert sessions.resolve_caller_secret('sid-1') == ''
    assert sessions.login('sid-1', SECRET) is True
    assert sessions.is_authorized(sessions.resolve_caller_secret('sid-1'))


def test_wrong_reconnect_leaves_connection_read_only():
    sessions = SessionRegistry(SECRET)
    sessions.connect('sid-1')
    sessions.reconnect('sid-1', 'stale-secret')
    assert not sessions.is_authorized(sessions.resolve_caller_secret('sid-1'))

    sessions.reconnect('sid-1', SECRET)
    assert sessions.is_authorized(sessions.resolve_caller_secret('sid-1'))


def test_disconnect_drops_the_slot():
    sessions = SessionRegistry(SECRET)
    sessions.connect('sid-1')
    sessions.connect('sid-2')
    sessions.login('sid-1', SECRET)
    assert len(sessions) == 2

    sessions.disconnect('sid-1')
    assert sessions.resolve_caller_secret('sid-1') == ''
    assert len(sessions) == 1
    # Unknown sids are ignored
    sessions.disconnect('sid-404')
    assert len(sessions) == 1


def test_non_string_secret_is_refused():
    sessions = SessionRegistry(SECRET)
    assert not sessions.is_authorized(None)
    assert not sessions.is_authorized(12345)
