#
#
#

import logging
from collections import defaultdict

from octodns.provider.base import BaseProvider
from octodns.record import Record

__version__ = __VERSION__ = '0.1.0'

from .exceptions import (  # noqa: E402
    TidyDNSClientAddressConflict,
    TidyDNSClientAmbiguousMatch,
    TidyDNSClientCancelled,
    TidyDNSClientConflict,
    TidyDNSClientDecodeError,
    TidyDNSClientDuplicateUsername,
    TidyDNSClientException,
    TidyDNSClientNotFound,
    TidyDNSClientTransportError,
    TidyDNSClientUnexpectedStatus,
    TidyDNSClientUnknownEnumValue,
)
from .models import RecordInput, RecordStatus, RecordType  # noqa: E402
from .tidydns_client import TidyDNSClient  # noqa: E402

__all__ = [
    'TidyDNSClient',
    'TidyDNSProvider',
    'TidyDNSClientException',
    'TidyDNSClientTransportError',
    'TidyDNSClientCancelled',
    'TidyDNSClientUnexpectedStatus',
    'TidyDNSClientDecodeError',
    'TidyDNSClientNotFound',
    'TidyDNSClientAmbiguousMatch',
    'TidyDNSClientConflict',
    'TidyDNSClientAddressConflict',
    'TidyDNSClientDuplicateUsername',
    'TidyDNSClientUnknownEnumValue',
]

# TidyDNS writes the zone apex as '.'
APEX = '.'

_TYPE_NAMES = {
    RecordType.A: 'A',
    # A with an automatic PTR is still an A record as far as octoDNS cares
    RecordType.APTR: 'A',
    RecordType.CNAME: 'CNAME',
    RecordType.NS: 'NS',
    RecordType.TXT: 'TXT',
}

_RECORD_TYPES = {
    'A': RecordType.A,
    'CNAME': RecordType.CNAME,
    'NS': RecordType.NS,
    'TXT': RecordType.TXT,
}


class TidyDNSProvider(BaseProvider):
    SUPPORTS_GEO = False
    SUPPORTS_DYNAMIC = False
    SUPPORTS_ROOT_NS = False
    SUPPORTS = set(('A', 'CNAME', 'NS', 'TXT'))

    def __init__(self, id, url, username, password, *args, **kwargs):
        self.log = logging.getLogger(f'TidyDNSProvider[{id}]')
        timeout = kwargs.pop('timeout', None)
        update_strategy = kwargs.pop('update_strategy', 'in-place')
        self.default_ttl = kwargs.pop('default_ttl', 3600)
        self.location_id = kwargs.pop('location_id', 0)
        self.log.debug(
            '__init__: id=%s, url=%s, username=%s, password=***, '
            'update_strategy=%s',
            id,
            url,
            username,
            update_strategy,
        )
        super().__init__(id, *args, **kwargs)

        self._client = TidyDNSClient(url, username, password, timeout=timeout)
        self._strategy = self._create_strategy(update_strategy)

        # Cache structures
        self._zone_records = {}
        self._zone_ids = {}

    def _create_strategy(self, update_strategy: str):
        """Factory method for strategy creation.

        Raises:
            ValueError: If update_strategy is invalid
        """
        from .strategies import InPlaceStrategy, ReplaceStrategy

        if update_strategy == 'in-place':
            return InPlaceStrategy()
        elif update_strategy == 'replace':
            return ReplaceStrategy()
        raise ValueError(
            f"Invalid update_strategy '{update_strategy}'. "
            "Must be 'in-place' or 'replace'"
        )

    def _append_dot(self, value):
        if value[-1] == '.':
            return value
        return f'{value}.'

    def zone_id(self, zone_name):
        if zone_name not in self._zone_ids:
            self._zone_ids[zone_name] = self._client.find_zone_id(
                zone_name[:-1]
            )
        return self._zone_ids[zone_name]

    def _octodns_name(self, record):
        return '' if record.name == APEX else record.name

    def _tidy_name(self, name):
        return name or APEX

    def _skip(self, record):
        # Rows the merged view synthesizes (SOA inherited NS) have no id
        if record.id == 0:
            return 'synthesized'
        if record.status in (RecordStatus.INACTIVE, RecordStatus.DELETED):
            return 'inactive'
        _type = _TYPE_NAMES.get(record.type)
        if _type is None:
            return 'unsupported'
        if _type == 'NS' and record.name == APEX:
            return 'root NS'
        return None

    def _record_ttl(self, record):
        # 0 means the zone default
        return record.ttl or self.default_ttl

    def _data_for_multiple(self, _type, records):
        values = [r.destination.replace(';', '\\;') for r in records]
        return {
            'ttl': self._record_ttl(records[0]),
            'type': _type,
            'values': values,
        }

    _data_for_A = _data_for_multiple
    _data_for_TXT = _data_for_multiple

    def _data_for_CNAME(self, _type, records):
        record = records[0]
        return {
            'ttl': self._record_ttl(record),
            'type': _type,
            'value': self._append_dot(record.destination),
        }

    def _data_for_NS(self, _type, records):
        values = [self._append_dot(r.destination) for r in records]
        return {
            'ttl': self._record_ttl(records[0]),
            'type': _type,
            'values': values,
        }

    def list_zones(self):
        self.log.debug('list_zones:')
        return sorted(
            f'{zone.name}.' for zone in self._client.list_zones() if zone.name
        )

    def zone_records(self, zone):
        if zone.name not in self._zone_records:
            try:
                zone_id = self.zone_id(zone.name)
            except TidyDNSClientNotFound:
                return []
            self._zone_records[zone.name] = self._client.list_records(zone_id)

        return self._zone_records[zone.name]

    def populate(self, zone, target=False, lenient=False):
        self.log.debug(
            'populate: name=%s, target=%s, lenient=%s',
            zone.name,
            target,
            lenient,
        )

        values = defaultdict(lambda: defaultdict(list))
        for record in self.zone_records(zone):
            reason = self._skip(record)
            if reason == 'unsupported':
                self.log.warning(
                    'populate: skipping unsupported %s record',
                    record.type.name,
                )
            if reason:
                continue
            name = self._octodns_name(record)
            values[name][_TYPE_NAMES[record.type]].append(record)

        before = len(zone.records)
        for name, types in values.items():
            for _type, records in types.items():
                data_for = getattr(self, f'_data_for_{_type}')
                record = Record.new(
                    zone,
                    name,
                    data_for(_type, records),
                    source=self,
                    lenient=lenient,
                )
                zone.add_record(record, lenient=lenient)

        exists = zone.name in self._zone_records
        self.log.info(
            'populate:   found %s records, exists=%s',
            len(zone.records) - before,
            exists,
        )
        return exists

    def _params_for_multiple(self, record):
        for value in record.values:
            yield value.replace('\\;', ';')

    _params_for_A = _params_for_multiple
    _params_for_NS = _params_for_multiple
    _params_for_TXT = _params_for_multiple

    def _params_for_CNAME(self, record):
        yield record.value

    def _record_inputs(self, record, existing=()):
        # Destinations that survive keep their stored type, so an A row
        # with automatic PTR stays one when it is recreated
        types = {r.destination: r.type for r in existing}
        params_for = getattr(self, f'_params_for_{record._type}')
        return [
            RecordInput(
                type=types.get(destination, _RECORD_TYPES[record._type]),
                name=self._tidy_name(record.name),
                destination=destination,
                ttl=record.ttl,
                location_id=self.location_id,
            )
            for destination in params_for(record)
        ]

    def _existing_rows(self, record):
        # ttls are reported as octoDNS sees them, 0 as default_ttl
        name = self._tidy_name(record.name)
        return [
            r.model_copy(update={'ttl': self._record_ttl(r)})
            for r in self.zone_records(record.zone)
            if not self._skip(r)
            and r.name == name
            and _TYPE_NAMES[r.type] == record._type
        ]

    def _apply_Create(self, zone_id, change):
        self._strategy.apply_create(
            self._client, zone_id, self._record_inputs(change.new)
        )

    def _apply_Update(self, zone_id, change):
        existing = self._existing_rows(change.existing)
        self._strategy.apply_update(
            self._client,
            zone_id,
            self._record_inputs(change.new, existing),
            existing,
        )

    def _apply_Delete(self, zone_id, change):
        self._strategy.apply_delete(
            self._client, zone_id, self._existing_rows(change.existing)
        )

    def _apply(self, plan):
        desired = plan.desired
        changes = plan.changes
        self.log.debug(
            '_apply: zone=%s, len(changes)=%d', desired.name, len(changes)
        )

        # There is no zone create endpoint, the zone has to exist already
        zone_id = self.zone_id(desired.name)

        for change in changes:
            class_name = change.__class__.__name__
            getattr(self, f'_apply_{class_name}')(zone_id, change)

        # Clear out the cache if any
        self._zone_records.pop(desired.name, None)
