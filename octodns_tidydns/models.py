#
#
#

"""Public models returned by and passed to the TidyDNS client.

These are the stable shapes callers work with. The raw API bodies live in
`octodns_tidydns.wire` and are mapped onto these models there.
"""

from datetime import datetime
from enum import IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from .exceptions import TidyDNSClientUnknownEnumValue


class RecordType(IntEnum):
    A = 0
    APTR = 1
    CNAME = 2
    MX = 3
    NS = 4
    TXT = 5
    SRV = 6
    DS = 7
    SSHFP = 8
    TLSA = 9
    CAA = 10


class RecordStatus(IntEnum):
    ACTIVE = 0
    INACTIVE = 1
    DELETED = 2


class AuthGroup(IntEnum):
    SUPER_ADMIN = 1
    USER = 2

    @classmethod
    def from_wire(cls, value: str) -> 'AuthGroup':
        """Look up a group by the name the API reports.

        Raises:
            TidyDNSClientUnknownEnumValue: for any name but User/SuperAdmin
        """
        try:
            return _AUTH_GROUP_NAMES[value]
        except (KeyError, TypeError):
            raise TidyDNSClientUnknownEnumValue('auth group', value) from None


_AUTH_GROUP_NAMES = {
    'SuperAdmin': AuthGroup.SUPER_ADMIN,
    'User': AuthGroup.USER,
}


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True)


class Zone(_Model):
    id: int
    name: str


class SubnetIdentity(_Model):
    subnet_id: int
    zone_id: int
    vlan_number: int


class InterfaceInfo(_Model):
    ip: str
    name: str


class InterfaceCreateRequest(_Model):
    subnet_id: int
    zone_id: int
    ip: str
    name: str
    location_id: int = 0


class RecordInput(_Model):
    """Fields written by record create and update.

    Update ignores `type` and `name`; the service does not allow changing
    them on an existing record.
    """

    type: RecordType = RecordType.A
    name: str = ''
    description: str = ''
    destination: str
    ttl: int = 0
    status: RecordStatus = RecordStatus.ACTIVE
    location_id: int = 0


class Record(_Model):
    """A DNS record as read back from the service.

    `status` is None when the listing did not carry a usable value. Rows the
    merged listing synthesizes (e.g. NS inherited from the SOA) have id 0.
    """

    id: int
    type: RecordType
    name: str
    description: str = ''
    destination: str
    ttl: int = 0
    status: Optional[RecordStatus] = None
    location_id: int = 0


class UserGroup(_Model):
    id: int
    name: str
    group_name: str
    notes: Optional[str] = None
    description: Optional[str] = None


class UserAccount(_Model):
    id: int
    username: str
    name: str
    description: str
    modified_by: str
    modified_date: datetime
    password_changed_date: datetime
    auth_group: AuthGroup
    groups: List[UserGroup] = []
