#
# Tests for the apply strategies with a mock client
#

from unittest import TestCase
from unittest.mock import Mock, call

from octodns_tidydns.models import Record, RecordInput, RecordType
from octodns_tidydns.strategies import InPlaceStrategy, ReplaceStrategy


def existing(id, destination, ttl=0, _type=RecordType.A, name='www'):
    return Record(
        id=id, type=_type, name=name, destination=destination, ttl=ttl
    )


def desired(destination, ttl=0, _type=RecordType.A, name='www'):
    return RecordInput(type=_type, name=name, destination=destination, ttl=ttl)


class TestReplaceStrategy(TestCase):
    def test_create(self):
        client = Mock()
        ReplaceStrategy().apply_create(
            client, 7, [desired('10.0.0.1'), desired('10.0.0.2')]
        )
        client.create_record.assert_has_calls(
            [call(7, desired('10.0.0.1')), call(7, desired('10.0.0.2'))]
        )

    def test_update_deletes_then_creates(self):
        client = Mock()
        ReplaceStrategy().apply_update(
            client,
            7,
            [desired('10.0.0.1')],
            [existing(1, '10.0.0.1'), existing(2, '10.0.0.2')],
        )
        self.assertEqual(
            [
                call.delete_record(7, 1),
                call.delete_record(7, 2),
                call.create_record(7, desired('10.0.0.1')),
            ],
            client.mock_calls,
        )

    def test_delete(self):
        client = Mock()
        ReplaceStrategy().apply_delete(client, 7, [existing(3, '10.0.0.3')])
        client.delete_record.assert_called_once_with(7, 3)


class TestInPlaceStrategy(TestCase):
    def test_update_touches_only_changed_rows(self):
        client = Mock()
        InPlaceStrategy().apply_update(
            client,
            7,
            [
                desired('10.0.0.1'),
                desired('10.0.0.2', ttl=300),
                desired('10.0.0.4'),
            ],
            [
                existing(1, '10.0.0.1'),
                existing(2, '10.0.0.2'),
                existing(3, '10.0.0.3'),
            ],
        )
        self.assertEqual(
            [
                call.delete_record(7, 3),
                call.update_record(7, 2, desired('10.0.0.2', ttl=300)),
                call.create_record(7, desired('10.0.0.4')),
            ],
            client.mock_calls,
        )

    def test_update_cname_deletes_before_create(self):
        client = Mock()
        InPlaceStrategy().apply_update(
            client,
            7,
            [desired('new.example.com.', _type=RecordType.CNAME)],
            [existing(1, 'old.example.com.', _type=RecordType.CNAME)],
        )
        self.assertEqual(
            [
                call.delete_record(7, 1),
                call.create_record(
                    7, desired('new.example.com.', _type=RecordType.CNAME)
                ),
            ],
            client.mock_calls,
        )

    def test_update_duplicate_rows_are_removed(self):
        client = Mock()
        InPlaceStrategy().apply_update(
            client,
            7,
            [desired('10.0.0.1')],
            [existing(1, '10.0.0.1'), existing(2, '10.0.0.1')],
        )
        self.assertEqual([call.delete_record(7, 2)], client.mock_calls)
