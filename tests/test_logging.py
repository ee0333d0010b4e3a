"""Tests for logging configuration, hooks and collector log events."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from bulky import discarding, raising_at_end, up_to, up_to_and_raise
from bulky._logging import add_log_hook, configure_logging, get_logger, remove_log_hook
from bulky.errors import FailAtEndCollectError, FailFastCollectError
from tests.strategies import Recognized, make_thunks

pytestmark = pytest.mark.usefixtures('restore_logging')


@pytest.fixture
def events() -> list[dict[str, Any]]:
    """Capture every log event passing level filtering."""
    received: list[dict[str, Any]] = []
    add_log_hook(received.append)
    return received


class TestLogHooks:
    """Tests for logging hooks."""

    def test_hook_receives_log_events(self, events) -> None:
        configure_logging(level='DEBUG', json_output=True)
        get_logger('test').info('Test message', extra_field='extra_value')

        entries = [e for e in events if e.get('event') == 'Test message']
        assert len(entries) == 1
        assert entries[0]['extra_field'] == 'extra_value'
        assert entries[0]['level'] == 'info'
        assert entries[0]['logger'] == 'test'

    def test_remove_hook(self) -> None:
        calls: list[str] = []

        def hook(event_dict: dict[str, Any]) -> None:
            calls.append(event_dict['event'])

        configure_logging(level='DEBUG')
        add_log_hook(hook)
        get_logger('test').info('first')
        remove_log_hook(hook)
        get_logger('test').info('second')
        assert calls == ['first']

    def test_failing_hook_does_not_break_logging(self, events) -> None:
        def broken(event_dict: dict[str, Any]) -> None:
            raise RuntimeError('hook failure')

        configure_logging(level='DEBUG')
        remove_log_hook(events.append)
        add_log_hook(broken)
        add_log_hook(events.append)
        get_logger('test').info('still logged')
        assert [e['event'] for e in events] == ['still logged']

    def test_events_below_level_are_dropped(self, events) -> None:
        configure_logging(level='WARNING')
        get_logger('test').debug('hidden')
        assert events == []


class TestRendering:
    """Tests for rendered output."""

    def test_json_output(self, capsys) -> None:
        configure_logging(level='INFO', json_output=True)
        get_logger('bulky.test').info('rendered', count=2)
        err = capsys.readouterr().err
        assert '"event": "rendered"' in err
        assert '"count": 2' in err

    def test_console_output(self, capsys) -> None:
        configure_logging(level='INFO', json_output=False)
        get_logger('bulky.test').info('rendered')
        assert 'rendered' in capsys.readouterr().err

    def test_foreign_stdlib_records_are_rendered(self, capsys) -> None:
        configure_logging(level='INFO', json_output=True)
        logging.getLogger('thirdparty').warning('plain %s', 'record')
        assert '"event": "plain record"' in capsys.readouterr().err


class TestCollectorEvents:
    """Tests for events emitted by collectors."""

    def test_silent_unless_configured(self, events) -> None:
        logging.getLogger().setLevel(logging.WARNING)
        discarding(Recognized).collect(make_thunks([None], []))
        assert events == []

    def test_discarding(self, events) -> None:
        configure_logging(level='DEBUG')
        discarding(Recognized).collect(make_thunks([1, None], []))
        [event] = [e for e in events if e['event'] == 'failure_discarded']
        assert event['policy'] == 'discarding'
        assert event['error'] == 'Recognized(1)'
        assert event['logger'] == 'bulky.collectors'

    def test_up_to(self, events) -> None:
        configure_logging(level='DEBUG')
        up_to(Recognized).collect(make_thunks([1, None, 3], []))
        [event] = [e for e in events if e['event'] == 'collection_halted']
        assert event['collected'] == 1

    def test_up_to_and_raise(self, events) -> None:
        configure_logging(level='DEBUG')
        with pytest.raises(FailFastCollectError):
            up_to_and_raise(Recognized).collect(make_thunks([None], []))
        [event] = [e for e in events if e['event'] == 'collection_failed']
        assert event['policy'] == 'up_to_and_raise'

    def test_raising_at_end(self, events) -> None:
        configure_logging(level='DEBUG')
        with pytest.raises(FailAtEndCollectError):
            raising_at_end(Recognized).collect(make_thunks([None, 2, None], []))
        assert [e['event'] for e in events].count('failure_recorded') == 2
        [event] = [e for e in events if e['event'] == 'collection_failed']
        assert event['failures'] == 2
        assert event['error'] == 'Recognized(0)'
        assert event['collected'] == 1
