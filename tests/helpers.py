#
# Fake requests session serving canned TidyDNS responses
#

from os.path import dirname, join
from urllib.parse import parse_qs, urlsplit

from requests import PreparedRequest, Request, Response

FIXTURES = join(dirname(__file__), 'fixtures')


def fixture(name):
    with open(join(FIXTURES, name), 'rb') as fh:
        return fh.read()


class FakeResponse(Response):
    def __init__(self, body, status_code, reason):
        super().__init__()
        self.status_code = status_code
        self.reason = reason
        self._content = body
        self.encoding = 'utf-8'
        self.closed = False

    def close(self):
        self.closed = True


def response(body=b'', status_code=200, reason='OK'):
    if isinstance(body, str):
        body = body.encode('utf-8')
    return FakeResponse(body, status_code, reason)


class FakeSession:
    """Stands in for requests.Session.

    Each request is prepared for real, so tests see the exact url, query
    string, headers and form body that would go over the wire. Responses
    are handed out in order.
    """

    def __init__(self, *responses):
        self.headers = {}
        self.auth = None
        self.requests = []
        self.kwargs = []
        self.responses = []
        # per request, whether every earlier response was closed by then
        self.closed_before = []
        self._queue = list(responses)
        self.error = None

    def request(self, method, url, **kwargs):
        if self.error is not None:
            raise self.error
        self.kwargs.append(kwargs)
        self.closed_before.append(all(r.closed for r in self.responses))
        prepared = Request(
            method,
            url,
            params=kwargs.get('params'),
            data=kwargs.get('data'),
            headers={**self.headers, **(kwargs.get('headers') or {})},
            auth=self.auth,
        ).prepare()
        self.requests.append(prepared)
        resp = self._queue.pop(0)
        resp.url = prepared.url
        resp.request = prepared
        self.responses.append(resp)
        return resp

    @property
    def last(self) -> PreparedRequest:
        return self.requests[-1]


def path_of(prepared):
    return urlsplit(prepared.url).path


def query_of(prepared):
    return parse_qs(urlsplit(prepared.url).query, keep_blank_values=True)


def form_of(prepared):
    body = prepared.body or ''
    if isinstance(body, bytes):
        body = body.decode('utf-8')
    return parse_qs(body, keep_blank_values=True)
