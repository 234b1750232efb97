#
#
#

from octodns.provider import ProviderException


class TidyDNSClientException(ProviderException):
    pass


class TidyDNSClientTransportError(TidyDNSClientException):
    def __init__(self, cause):
        super().__init__(f'transport error: {cause}')
        self.cause = cause


class TidyDNSClientCancelled(TidyDNSClientException):
    def __init__(self, cause=None):
        super().__init__('request cancelled')
        self.cause = cause


class TidyDNSClientUnexpectedStatus(TidyDNSClientException):
    def __init__(self, status_code, reason):
        super().__init__(f'error from tidyDNS server: {status_code} {reason}')
        self.status_code = status_code
        self.reason = reason


class TidyDNSClientDecodeError(TidyDNSClientException):
    pass


class TidyDNSClientNotFound(TidyDNSClientException):
    def __init__(self, msg='Not Found'):
        super().__init__(msg)


class TidyDNSClientAmbiguousMatch(TidyDNSClientException):
    pass


class TidyDNSClientConflict(TidyDNSClientException):
    pass


class TidyDNSClientAddressConflict(TidyDNSClientConflict):
    """The submitted ip was taken between allocation and creation.

    Fetch a fresh address with `allocate_free_ip` and try again.
    """

    def __init__(self, ip):
        super().__init__(f'address already in use, try again: {ip}')
        self.ip = ip


class TidyDNSClientDuplicateUsername(TidyDNSClientConflict):
    def __init__(self, username):
        super().__init__(f'username already exists: {username}')
        self.username = username


class TidyDNSClientUnknownEnumValue(TidyDNSClientException):
    def __init__(self, kind, value):
        super().__init__(f'unknown {kind}: {value!r}')
        self.kind = kind
        self.value = value
