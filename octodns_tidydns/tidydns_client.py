#
#
#

from typing import List, Optional, Sequence

from pydantic import ValidationError
from requests import RequestException, Session, Timeout

from octodns import __VERSION__ as octodns_version

from . import __version__ as package_version
from .exceptions import (
    TidyDNSClientAddressConflict,
    TidyDNSClientAmbiguousMatch,
    TidyDNSClientCancelled,
    TidyDNSClientDecodeError,
    TidyDNSClientDuplicateUsername,
    TidyDNSClientNotFound,
    TidyDNSClientTransportError,
    TidyDNSClientUnexpectedStatus,
)
from .models import (
    AuthGroup,
    InterfaceCreateRequest,
    InterfaceInfo,
    Record,
    RecordInput,
    RecordType,
    SubnetIdentity,
    UserAccount,
    Zone,
)
from .wire import (
    DHCPFreeIP,
    DHCPSubnetRow,
    InterfaceCreated,
    InterfaceRow,
    RecordListRow,
    RecordRow,
    UserCreated,
    UserRow,
    ZoneRow,
)

MIME_FORM = 'application/x-www-form-urlencoded'


def _format_allowed_ids(allowed_ids):
    # An empty list is sent as a single blank value, meaning "no restriction"
    if not allowed_ids:
        return ['']
    return [str(int(i)) for i in allowed_ids]


class TidyDNSClient(object):
    """Client for the TidyDNS administrative API.

    Holds nothing but the connection parameters and the transport, so a
    single instance can be shared. Every call goes to the service; nothing
    is cached and nothing is retried.

    `timeout` bounds each request made; every operation also takes a
    `timeout` keyword overriding it for that call. A request running past
    its timeout raises `TidyDNSClientCancelled`.
    """

    def __init__(
        self, base_url, username, password, session=None, timeout=None
    ):
        if session is None:
            session = Session()
        session.auth = (username, password)
        session.headers.update(
            {
                'User-Agent': f'octodns/{octodns_version} octodns-tidydns/{package_version}'
            }
        )
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._session = session

    def _do(self, method, path, params=None, data=None, timeout=None):
        url = f'{self.base_url}{path}'
        headers = None
        if data is not None:
            headers = {'Content-Type': MIME_FORM}
        if timeout is None:
            timeout = self.timeout
        try:
            return self._session.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                timeout=timeout,
            )
        except Timeout as e:
            raise TidyDNSClientCancelled(e) from e
        except RequestException as e:
            raise TidyDNSClientTransportError(e) from e

    def _check(self, response):
        if response.status_code != 200:
            raise TidyDNSClientUnexpectedStatus(
                response.status_code, response.reason
            )

    def _decode(self, response, model):
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise TidyDNSClientDecodeError(
                f'unexpected response from {response.url}: {e}'
            ) from e

    def _decode_list(self, response, model):
        try:
            rows = response.json()
        except ValueError as e:
            raise TidyDNSClientDecodeError(
                f'unexpected response from {response.url}: {e}'
            ) from e
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise TidyDNSClientDecodeError(
                f'expected a list from {response.url}, got {type(rows).__name__}'
            )
        try:
            return [model.model_validate(row) for row in rows]
        except ValidationError as e:
            raise TidyDNSClientDecodeError(
                f'unexpected response from {response.url}: {e}'
            ) from e

    def _get(self, path, model, params=None, timeout=None):
        with self._do(
            'GET', path, params=params, timeout=timeout
        ) as response:
            self._check(response)
            return self._decode(response, model)

    def _get_list(self, path, model, params=None, timeout=None):
        with self._do(
            'GET', path, params=params, timeout=timeout
        ) as response:
            self._check(response)
            return self._decode_list(response, model)

    def _send(self, method, path, data=None, timeout=None):
        with self._do(method, path, data=data, timeout=timeout) as response:
            self._check(response)

    # --- Zones ------------------------------------------------------------

    def list_zones(self, timeout=None) -> List[Zone]:
        rows = self._get_list(
            '/=/zone', ZoneRow, {'type': 'json'}, timeout=timeout
        )
        return [row.to_zone() for row in rows]

    def find_zone_id(self, name: str, timeout=None) -> int:
        """Return the id of the zone called exactly `name`.

        The service matches the name loosely, so the rows it returns are
        filtered again here.

        Raises:
            TidyDNSClientNotFound: when no zone has exactly that name
        """
        rows = self._get_list(
            '/=/zone', ZoneRow, {'type': 'json', 'name': name}, timeout=timeout
        )
        if not rows:
            raise TidyDNSClientNotFound(f'zone not found for: {name}')
        for row in rows:
            if row.name == name:
                return row.id
        raise TidyDNSClientNotFound(f'unable to match zone name: {name}')

    # --- Records ----------------------------------------------------------

    def _merged_records(self, zone_id, timeout=None):
        return self._get_list(
            '/=/record_merged',
            RecordListRow,
            {'type': 'json', 'zone_id': zone_id, 'showall': 1},
            timeout=timeout,
        )

    def create_record(
        self, zone_id: int, record: RecordInput, timeout=None
    ) -> int:
        """Create a record and return its id.

        The create call does not reliably report the new id, so the zone's
        merged listing is fetched afterwards and searched for the
        (type, name, destination) that was just written.

        Raises:
            TidyDNSClientNotFound: when the listing has no such record
        """
        data = {
            'type': int(record.type),
            'name': record.name,
            'ttl': record.ttl,
            'description': record.description,
            'status': int(record.status),
            'destination': record.destination,
            'location_id': record.location_id,
        }
        self._send('POST', f'/=/record/new/{zone_id}', data, timeout=timeout)

        for row in self._merged_records(zone_id, timeout=timeout):
            if row.matches(record.type, record.name, record.destination):
                return row.id

        raise TidyDNSClientNotFound('unable to find new record')

    def update_record(
        self, zone_id: int, record_id: int, record: RecordInput, timeout=None
    ) -> None:
        data = {
            'ttl': record.ttl,
            'description': record.description,
            'status': int(record.status),
            'destination': record.destination,
            'location_id': record.location_id,
        }
        self._send(
            'POST', f'/=/record/{record_id}/{zone_id}', data, timeout=timeout
        )

    def read_record(
        self, zone_id: int, record_id: int, timeout=None
    ) -> Record:
        row = self._get(
            f'/=/record/{zone_id}/{record_id}', RecordRow, timeout=timeout
        )
        return row.to_record()

    def find_record(
        self, zone_id: int, name: str, _type: RecordType, timeout=None
    ) -> List[Record]:
        rows = self._get_list(
            '/=/record',
            RecordListRow,
            {'type': 'json', 'zone': zone_id, 'name': name},
            timeout=timeout,
        )
        return [
            row.to_record()
            for row in rows
            if row.type == _type and row.name == name
        ]

    def list_records(self, zone_id: int, timeout=None) -> List[Record]:
        rows = self._merged_records(zone_id, timeout=timeout)
        return [row.to_record() for row in rows]

    def delete_record(
        self, zone_id: int, record_id: int, timeout=None
    ) -> None:
        self._send(
            'DELETE', f'/=/record/{record_id}/{zone_id}', timeout=timeout
        )

    # --- DHCP -------------------------------------------------------------

    def resolve_subnet(self, cidr: str, timeout=None) -> SubnetIdentity:
        rows = self._get_list(
            '/=/dhcp_subnet', DHCPSubnetRow, {'subnet': cidr}, timeout=timeout
        )
        if not rows:
            raise TidyDNSClientNotFound(f'subnet not found: {cidr}')
        if len(rows) > 1:
            raise TidyDNSClientAmbiguousMatch(f'too many subnets found: {cidr}')
        return rows[0].to_subnet_identity()

    def allocate_free_ip(self, subnet_id: int, timeout=None) -> str:
        """Ask the service for an unused address in the subnet.

        Nothing is reserved; another caller may be handed the same address.
        """
        free = self._get(
            f'/=/dhcp_subnet_free_ip/{subnet_id}', DHCPFreeIP, timeout=timeout
        )
        return free.data.ip_address

    def create_interface(
        self, request: InterfaceCreateRequest, timeout=None
    ) -> int:
        """Create a DHCP interface and return its id.

        Raises:
            TidyDNSClientAddressConflict: when the ip was taken in the
                meantime; allocate a fresh one and call again
        """
        data = {
            'subnet_id': request.subnet_id,
            'zone_id': request.zone_id,
            'name': request.name,
            'destination': request.ip,
            'location_id': request.location_id,
        }
        conflict = f'Key (destination)=({request.ip}) already exists'
        with self._do(
            'POST', '/=/dhcp_interface//new', data=data, timeout=timeout
        ) as response:
            if response.status_code != 200:
                if conflict in response.text:
                    raise TidyDNSClientAddressConflict(request.ip)
                self._check(response)
            created = self._decode(response, InterfaceCreated)
        return created.id

    def read_interface(self, interface_id: int, timeout=None) -> InterfaceInfo:
        row = self._get(
            '/=/dhcp_interface/',
            InterfaceRow,
            {'id': interface_id},
            timeout=timeout,
        )
        return row.to_interface_info()

    def rename_interface(
        self, interface_id: int, name: str, timeout=None
    ) -> int:
        path = f'/=/dhcp_interface//{interface_id}'
        with self._do(
            'POST', path, data={'name': name}, timeout=timeout
        ) as response:
            self._check(response)
            updated = self._decode(response, InterfaceCreated)
        return updated.id

    def delete_interface(self, interface_id: int, timeout=None) -> None:
        self._send(
            'DELETE', f'/=/dhcp_interface/{interface_id}', timeout=timeout
        )

    # --- Users ------------------------------------------------------------

    def create_user(
        self,
        username: str,
        password: str,
        description: str,
        force_password_change: bool,
        auth_group: AuthGroup,
        allowed_ids: Sequence[int] = (),
        timeout=None,
    ) -> int:
        """Create an internal user and return its id.

        Raises:
            TidyDNSClientDuplicateUsername: when the username is taken
        """
        data = {
            'username': username,
            'epassword': password,
            'epassword_verify': password,
            'change_password_on_first_login': (
                '1' if force_password_change else '0'
            ),
            'description': description,
            'auth_group': int(auth_group),
            'user_allow': _format_allowed_ids(allowed_ids),
        }
        duplicate = f'Key (username)=({username}) already exists'
        with self._do(
            'POST', '/=/user/new', data=data, timeout=timeout
        ) as response:
            if response.status_code != 200:
                if duplicate in response.text:
                    raise TidyDNSClientDuplicateUsername(username)
                self._check(response)
            created = self._decode(response, UserCreated)
        return created.data.id

    def get_user(self, user_id: int, timeout=None) -> UserAccount:
        row = self._get(f'/=/user/{user_id}', UserRow, timeout=timeout)
        try:
            return row.to_user_account()
        except ValueError as e:
            raise TidyDNSClientDecodeError(
                f'unexpected user {user_id} from server: {e}'
            ) from e

    def update_user(
        self,
        user_id: int,
        password: Optional[str] = None,
        description: Optional[str] = None,
        auth_group: Optional[AuthGroup] = None,
        allowed_ids: Optional[Sequence[int]] = None,
        timeout=None,
    ) -> None:
        """Change the given fields of a user; fields left as None are not
        sent and stay as they are on the server."""
        data = {}
        if password is not None:
            data['epassword'] = password
            data['epassword_verify'] = password
        if description is not None:
            data['description'] = description
        if auth_group is not None:
            data['auth_group'] = int(auth_group)
        if allowed_ids is not None:
            data['user_allow'] = _format_allowed_ids(allowed_ids)

        with self._do(
            'POST', f'/=/user/{user_id}', data=data, timeout=timeout
        ) as response:
            self._check(response)
            self._decode(response, UserCreated)

    def delete_user(self, user_id: int, timeout=None) -> None:
        self._send('DELETE', f'/=/user/{user_id}', timeout=timeout)
