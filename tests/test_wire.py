#
# Tests for normalizing the loosely typed TidyDNS response bodies
#

import json
from datetime import datetime, timezone
from unittest import TestCase

from helpers import fixture
from pydantic import ValidationError

from octodns_tidydns import TidyDNSClientUnknownEnumValue
from octodns_tidydns.models import AuthGroup, RecordStatus, RecordType
from octodns_tidydns.wire import (
    InterfaceCreated,
    RecordListRow,
    RecordRow,
    UserRow,
    parse_timestamp,
)


class TestRecordListRow(TestCase):
    def row(self, **overrides):
        data = {
            'id': 64694,
            'type': 0,
            'name': 'tal-test',
            'destination': '10.68.1.2',
        }
        data.update(overrides)
        return RecordListRow.model_validate(data).to_record()

    def test_status_variants(self):
        self.assertEqual(RecordStatus.ACTIVE, self.row(status='0').status)
        self.assertEqual(RecordStatus.ACTIVE, self.row(status=0).status)
        self.assertEqual(RecordStatus.DELETED, self.row(status='2').status)
        self.assertIsNone(self.row(status=-1).status)
        self.assertIsNone(self.row(status=None).status)
        self.assertIsNone(self.row(status='').status)
        self.assertIsNone(self.row().status)

    def test_nulls(self):
        record = self.row(
            id=None, description=None, location_id=None, ttl=None
        )
        self.assertEqual(0, record.id)
        self.assertEqual('', record.description)
        self.assertEqual(0, record.location_id)
        self.assertEqual(0, record.ttl)
        # matching fields survive
        self.assertEqual(RecordType.A, record.type)
        self.assertEqual('tal-test', record.name)
        self.assertEqual('10.68.1.2', record.destination)

    def test_type_as_string(self):
        self.assertEqual(RecordType.TXT, self.row(type='5').type)

    def test_unknown_type_rejected(self):
        with self.assertRaises(ValidationError):
            self.row(type=42)

    def test_matches(self):
        row = RecordListRow.model_validate(
            json.loads(fixture('record_merged_short.json'))[0]
        )
        self.assertTrue(row.matches(RecordType.A, 'tal-test', '10.68.1.2'))
        self.assertFalse(row.matches(RecordType.APTR, 'tal-test', '10.68.1.2'))
        self.assertFalse(row.matches(RecordType.A, 'tal-test.', '10.68.1.2'))
        self.assertFalse(row.matches(RecordType.A, 'tal-test', '10.68.1.3'))

    def test_whole_listing(self):
        rows = json.loads(fixture('record_merged.json'))
        records = [RecordListRow.model_validate(r).to_record() for r in rows]
        self.assertEqual(22, len(records))
        self.assertEqual(
            {RecordType.A: 10, RecordType.NS: 3, RecordType.TXT: 9},
            {
                t: len([r for r in records if r.type == t])
                for t in (RecordType.A, RecordType.NS, RecordType.TXT)
            },
        )
        self.assertEqual([0], [r.id for r in records if r.status is None])


class TestRecordRow(TestCase):
    def test_read_shape(self):
        row = RecordRow.model_validate(json.loads(fixture('record_read.json')))
        record = row.to_record()
        self.assertEqual(64694, record.id)
        self.assertEqual(RecordStatus.ACTIVE, record.status)
        self.assertEqual(0, record.ttl)

    def test_read_shape_needs_status(self):
        data = json.loads(fixture('record_read.json'))
        del data['status']
        with self.assertRaises(ValidationError):
            RecordRow.model_validate(data)


class TestInterfaceCreated(TestCase):
    def test_status_string_or_int(self):
        for status in ('0', 0):
            created = InterfaceCreated.model_validate(
                {'status': status, 'id': 30641, 'subnet_id': 1185}
            )
            self.assertEqual(30641, created.id)


class TestUserRow(TestCase):
    def test_to_user_account(self):
        row = UserRow.model_validate(json.loads(fixture('user_read.json')))
        user = row.to_user_account()
        self.assertEqual(AuthGroup.USER, user.auth_group)
        self.assertEqual('user', user.groups[0].group_name)

    def test_unknown_auth_group(self):
        data = json.loads(fixture('user_read.json'))
        data['auth_group'] = 'Operator'
        row = UserRow.model_validate(data)
        with self.assertRaises(TidyDNSClientUnknownEnumValue) as ctx:
            row.to_user_account()
        self.assertTrue(ctx.exception.__suppress_context__)
        self.assertIsNone(ctx.exception.__cause__)

    def test_missing_groups(self):
        data = json.loads(fixture('user_read.json'))
        del data['groups']
        user = UserRow.model_validate(data).to_user_account()
        self.assertEqual([], user.groups)


class TestParseTimestamp(TestCase):
    def test_utc(self):
        self.assertEqual(
            datetime(2024, 12, 3, 14, 17, 22, tzinfo=timezone.utc),
            parse_timestamp('2024-12-03 14:17:22'),
        )

    def test_other_format(self):
        with self.assertRaises(ValueError):
            parse_timestamp('03/12/2024 14:17')


class TestAuthGroup(TestCase):
    def test_from_wire(self):
        self.assertEqual(AuthGroup.USER, AuthGroup.from_wire('User'))
        self.assertEqual(
            AuthGroup.SUPER_ADMIN, AuthGroup.from_wire('SuperAdmin')
        )
        for value in ('user', 'superadmin', '', None):
            with self.assertRaises(TidyDNSClientUnknownEnumValue):
                AuthGroup.from_wire(value)
