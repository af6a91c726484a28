"""Fake requests sessions and responses so no test touches the network."""


class FakeResponse:
    """Just enough of requests.Response for the relay and the relay client."""

    def __init__(self, status_code=200, json_data=None, reason="", raise_on_json=False):
        self.status_code = status_code
        self.reason = reason
        self._json_data = json_data
        self._raise_on_json = raise_on_json

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._raise_on_json or self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


class FakeSession:
    """Records every post() and returns a canned response (or raises)."""

    def __init__(self, response=None, exc=None):
        self.response = response or FakeResponse()
        self.exc = exc
        self.calls = []
        self.closed = False

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.exc is not None:
            raise self.exc
        return self.response

    def close(self):
        self.closed = True


def completion(content="Estimated TCE: $18,400/day", role="assistant"):
    """A minimal successful chat completion body."""
    return {"choices": [{"index": 0, "message": {"role": role, "content": content}}]}
