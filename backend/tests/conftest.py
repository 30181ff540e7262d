"""
Shared fixtures for reference table tests
"""
import asyncio
import json
from collections import Counter

import pytest

from services.resource_fetcher import ResourceUnavailableError


class FakeFetcher:
    """
    In-memory fetcher that counts fetches per name.

    When ``gate`` is set every fetch waits on it, which keeps the resolver in
    its loading state until the test releases it.
    """

    def __init__(self, resources, gate=None):
        self.resources = resources
        self.gate = gate
        self.calls = Counter()

    async def fetch(self, name):
        self.calls[name] += 1
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if name not in self.resources:
            raise ResourceUnavailableError(name, "not found")
        return self.resources[name]


@pytest.fixture
def make_fetcher():
    """Factory for FakeFetcher instances"""
    return FakeFetcher


@pytest.fixture
def tlk_payload():
    """Encode an {id: text} dict as a JSON string table payload"""
    def _encode(strings):
        return json.dumps([[str_id, text] for str_id, text in strings.items()]).encode('utf-8')
    return _encode


@pytest.fixture
def reference_resources(tlk_payload):
    """Standard and custom string tables plus a small feat table"""
    return {
        'dialog.tlk': tlk_payload({500: 'Longsword', 501: 'Power Attack', 502: 'Gain a bonus.', 0: 'Bad Strref'}),
        'custom.tlk': tlk_payload({1: 'CustomSword', 2: 'Custom feat description'}),
        'feat.2da': (
            "2DA V2.0\n"
            "\n"
            "LABEL FEAT DESCRIPTION MINSTR GAINMULTIPLE\n"
            "0 PowerAttack 501 502 13 0\n"
            "1 **** 999 999 **** ****\n"
            "2 CustomFeat 16777217 16777218 **** 1\n"
            "3 Unknown 999 **** 0.5 0\n"
        ).encode('utf-8'),
    }
