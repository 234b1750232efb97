#
#
#

"""Protocol definition for the TidyDNS client interface.

This module defines structural typing (PEP 544) for the client, so the
provider and strategies can be checked against it and tests can hand them
any object with the same methods.
"""

from typing import List, Protocol

from .models import Record, RecordInput, Zone


class DNSClient(Protocol):
    """Protocol for the record side of the client.

    This is all the provider needs.
    """

    def list_zones(self) -> List[Zone]:
        """List all DNS zones."""
        ...

    def find_zone_id(self, name: str) -> int:
        """Get a zone's id by its exact name (without trailing dot).

        Raises:
            TidyDNSClientNotFound: when no zone has that name
        """
        ...

    def list_records(self, zone_id: int) -> List[Record]:
        """Get every record of a zone, including deleted and synthesized
        rows."""
        ...

    def create_record(self, zone_id: int, record: RecordInput) -> int:
        """Create a single DNS record.

        Returns:
            The new record's id
        """
        ...

    def update_record(
        self, zone_id: int, record_id: int, record: RecordInput
    ) -> None: ...

    def delete_record(self, zone_id: int, record_id: int) -> None: ...
