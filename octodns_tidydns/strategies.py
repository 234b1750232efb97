#
#
#

"""Apply strategies for turning octoDNS changes into TidyDNS record calls.

TidyDNS stores one row per value. How an update is carried out is a
choice: recreate every row of the name/type, or only touch the rows whose
destination actually changed and so keep the other rows' ids.
"""

from typing import List, Protocol

from .clients import DNSClient
from .models import Record, RecordInput


class ApplyStrategy(Protocol):
    """Protocol for change application strategies.

    `records` are the desired rows, one per value. `existing` are the rows
    currently stored for the same name and type.
    """

    def apply_create(
        self, client: DNSClient, zone_id: int, records: List[RecordInput]
    ) -> None: ...

    def apply_update(
        self,
        client: DNSClient,
        zone_id: int,
        records: List[RecordInput],
        existing: List[Record],
    ) -> None: ...

    def apply_delete(
        self, client: DNSClient, zone_id: int, existing: List[Record]
    ) -> None: ...


class ReplaceStrategy:
    """Delete every existing row, then create one row per value."""

    def apply_create(self, client, zone_id, records):
        for record in records:
            client.create_record(zone_id, record)

    def apply_update(self, client, zone_id, records, existing):
        # It's simpler to delete-then-recreate than to update
        self.apply_delete(client, zone_id, existing)
        self.apply_create(client, zone_id, records)

    def apply_delete(self, client, zone_id, existing):
        for record in existing:
            client.delete_record(zone_id, record.id)


class InPlaceStrategy(ReplaceStrategy):
    """Keep rows whose destination survives the update.

    Surviving rows get their ttl updated when it changed, dropped
    destinations are deleted and new ones created, in that order so that
    single-value types (CNAME) never have two rows at once.
    """

    def apply_update(self, client, zone_id, records, existing):
        by_destination = {}
        for current in existing:
            by_destination.setdefault(current.destination, []).append(current)

        updates = []
        creates = []
        for record in records:
            matches = by_destination.get(record.destination)
            if not matches:
                creates.append(record)
                continue
            current = matches.pop(0)
            if current.ttl != record.ttl:
                updates.append((current.id, record))

        deletes = [r for rows in by_destination.values() for r in rows]

        self.apply_delete(client, zone_id, deletes)
        for record_id, record in updates:
            client.update_record(zone_id, record_id, record)
        self.apply_create(client, zone_id, creates)
