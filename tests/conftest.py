"""
Test configuration and fixtures
"""
import json

import pytest

from calcwallet.crypto.custody import KeyCustody
from calcwallet.crypto.provider import CryptoProvider
from calcwallet.errors import NoCalculator
from calcwallet.hardware.link import CalculatorLink
from calcwallet.hardware.session import validate_slot


class MemoryLink(CalculatorLink):
    """In-memory calculator with the same slot contract as the real link"""

    def __init__(self, slots=None):
        self.slots = dict(slots or {})
        self.opened = False
        self.open_calls = 0
        self.close_calls = 0

    def open(self):
        self.open_calls += 1
        self.opened = True

    def close(self):
        self.close_calls += 1
        self.opened = False

    def store_bytes(self, slot, data):
        validate_slot(slot)
        if not self.opened:
            raise NoCalculator()
        self.slots[slot] = bytes(data)

    def fetch_bytes(self, slot):
        validate_slot(slot)
        if not self.opened:
            raise NoCalculator()
        return self.slots.get(slot, b"")


class FakeTransport:
    """
    Scripted NetworkTransport. ``responses`` maps a JSON-RPC method to a
    result value, a list of result values consumed in order, or an exception.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.requests = []
        self.closed = False

    def post_json(self, url, body, timeout):
        self.requests.append((url, body, timeout))
        reply = self.responses[body["method"]]
        if isinstance(reply, list):
            reply = reply.pop(0) if len(reply) > 1 else reply[0]
        if isinstance(reply, Exception):
            raise reply
        return json.dumps({"jsonrpc": "2.0", "id": body["id"], "result": reply})

    def methods(self):
        return [body["method"] for _, body, _ in self.requests]

    def close(self):
        self.closed = True


def status_result(confirmation_status, err=None):
    if confirmation_status is None:
        return {"context": {"slot": 1}, "value": [None]}
    return {"context": {"slot": 1},
            "value": [{"confirmationStatus": confirmation_status, "err": err}]}


@pytest.fixture
def provider():
    """Low work factor keeps sealing fast in tests"""
    return CryptoProvider(iterations=1000)


@pytest.fixture
def custody(provider):
    return KeyCustody(provider)


@pytest.fixture
def keypair(custody):
    kp = custody.generate_keypair()
    yield kp
    kp.wipe()


@pytest.fixture
def memory_link():
    return MemoryLink()
