#
#
#

"""Raw response bodies of the TidyDNS API and their normalization.

The API is loose about types: the same field can arrive as an int, a
numeric string or null depending on the endpoint (and sometimes on the
deployment). Each model here accepts what the service actually sends and
maps it onto the stable models in `octodns_tidydns.models`.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .models import (
    AuthGroup,
    InterfaceInfo,
    Record,
    RecordStatus,
    RecordType,
    SubnetIdentity,
    UserAccount,
    UserGroup,
    Zone,
)

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def _null_as_zero(v: Any) -> Any:
    return 0 if v is None else v


def _null_as_empty(v: Any) -> Any:
    return '' if v is None else v


def _lenient_status(v: Any) -> Optional[RecordStatus]:
    # Merged listings send "0", 0, -1 or nothing at all
    try:
        return RecordStatus(int(v))
    except (TypeError, ValueError):
        return None


def _record_type(v: Any) -> Any:
    if isinstance(v, str) and v.strip().isdigit():
        return int(v)
    return v


def parse_timestamp(value: str) -> datetime:
    """Parse a wire timestamp; the service reports UTC without an offset."""
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(
        tzinfo=timezone.utc
    )


NullableInt = Annotated[int, BeforeValidator(_null_as_zero)]
NullableStr = Annotated[str, BeforeValidator(_null_as_empty)]
LenientStatus = Annotated[
    Optional[RecordStatus], BeforeValidator(_lenient_status)
]
WireRecordType = Annotated[RecordType, BeforeValidator(_record_type)]


class WireModel(BaseModel):
    model_config = ConfigDict(extra='ignore')


class ZoneRow(WireModel):
    id: int
    name: str

    def to_zone(self) -> Zone:
        return Zone(id=self.id, name=self.name)


class DHCPSubnetRow(WireModel):
    id: int
    vlan_id: NullableInt = 0
    vlan_no: NullableInt = 0
    zone_id: NullableInt = 0
    location_id: NullableInt = 0

    def to_subnet_identity(self) -> SubnetIdentity:
        return SubnetIdentity(
            subnet_id=self.id, zone_id=self.zone_id, vlan_number=self.vlan_no
        )


class DHCPFreeIPData(WireModel):
    ip_address: str


class DHCPFreeIP(WireModel):
    status: Any = None
    data: DHCPFreeIPData


class InterfaceCreated(WireModel):
    # "0" on some deployments, 0 on others
    status: Any = None
    id: int
    subnet_id: NullableInt = 0


class InterfaceRow(WireModel):
    name: NullableStr = ''
    destination: NullableStr = ''

    def to_interface_info(self) -> InterfaceInfo:
        return InterfaceInfo(ip=self.destination, name=self.name)


class RecordRow(WireModel):
    """The single record read shape; `status` is always a real value."""

    id: int
    type: WireRecordType
    name: NullableStr = ''
    description: NullableStr = ''
    destination: NullableStr = ''
    ttl: NullableInt = 0
    status: RecordStatus
    location_id: NullableInt = 0

    def to_record(self) -> Record:
        return Record(
            id=self.id,
            type=self.type,
            name=self.name,
            description=self.description,
            destination=self.destination,
            ttl=self.ttl,
            status=self.status,
            location_id=self.location_id,
        )


class RecordListRow(RecordRow):
    """Search and merged listing shape.

    Synthesized rows come back with a null id and location and a status of
    -1, so those are all tolerated rather than rejected.
    """

    id: NullableInt = 0
    status: LenientStatus = None

    def matches(self, _type: RecordType, name: str, destination: str) -> bool:
        return (
            self.type == _type
            and self.name == name
            and self.destination == destination
        )


class IdData(WireModel):
    id: int


class UserCreated(WireModel):
    status: Any = None
    data: IdData


class UserGroupRow(WireModel):
    id: int
    name: NullableStr = ''
    groupname: NullableStr = ''
    notes: Optional[str] = None
    description: Optional[str] = None

    def to_user_group(self) -> UserGroup:
        return UserGroup(
            id=self.id,
            name=self.name,
            group_name=self.groupname,
            notes=self.notes,
            description=self.description,
        )


class UserRow(WireModel):
    id: int
    username: str
    name: NullableStr = ''
    description: NullableStr = ''
    modified_by: NullableStr = ''
    modified_date: str
    passwd_changed_date: str
    auth_group: str
    groups: List[UserGroupRow] = Field(default_factory=list)

    def to_user_account(self) -> UserAccount:
        # Timestamp parse errors propagate as ValueError for the caller to
        # translate; unknown groups raise their own exception
        return UserAccount(
            id=self.id,
            username=self.username,
            name=self.name,
            description=self.description,
            modified_by=self.modified_by,
            modified_date=parse_timestamp(self.modified_date),
            password_changed_date=parse_timestamp(self.passwd_changed_date),
            auth_group=AuthGroup.from_wire(self.auth_group),
            groups=[g.to_user_group() for g in self.groups],
        )
