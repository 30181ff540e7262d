"""
Tests for the string reference resolver
"""
import asyncio

import pytest

from services.string_resolver import (
    CUSTOM_TLK_OFFSET,
    ResolverState,
    StringRefResolver,
    parse_str_ref,
)


@pytest.fixture
def resources(tlk_payload):
    return {
        'dialog.tlk': tlk_payload({500: 'Longsword', 0: 'Bad Strref'}),
        'custom.tlk': tlk_payload({1: 'CustomSword'}),
    }


@pytest.fixture
def fetcher(resources, make_fetcher):
    return make_fetcher(resources)


@pytest.fixture
def resolver(fetcher):
    return StringRefResolver(fetcher)


class TestParseStrRef:

    def test_integers(self):
        assert parse_str_ref(500) == 500
        assert parse_str_ref('500') == 500
        assert parse_str_ref(' 42 ') == 42
        assert parse_str_ref(12.0) == 12

    def test_rejected(self):
        assert parse_str_ref(-1) is None
        assert parse_str_ref('-1') is None
        assert parse_str_ref('abc') is None
        assert parse_str_ref('1.5') is None
        assert parse_str_ref(1.5) is None
        assert parse_str_ref('') is None
        assert parse_str_ref(True) is None
        assert parse_str_ref(None) is None


class TestResolverLifecycle:
    """Test initialization and state transitions"""

    def test_starts_uninitialized(self, resolver):
        assert resolver.state == ResolverState.UNINITIALIZED
        assert not resolver.is_ready

    def test_resolve_before_init_returns_input(self, resolver):
        assert resolver.resolve('500') == '500'
        assert resolver.resolve(500) == '500'
        assert resolver.lookup('500') is None

    @pytest.mark.asyncio
    async def test_initialize_ready(self, resolver, fetcher):
        state = await resolver.initialize()

        assert state == ResolverState.READY
        assert resolver.is_ready
        assert resolver.table_sizes() == {'standard': 2, 'custom': 1}
        assert fetcher.calls == {'dialog.tlk': 1, 'custom.tlk': 1}

    @pytest.mark.asyncio
    async def test_initialize_only_once(self, resolver, fetcher):
        await resolver.initialize()
        await resolver.initialize()

        assert fetcher.calls == {'dialog.tlk': 1, 'custom.tlk': 1}

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_load(self, resources, make_fetcher):
        gate = asyncio.Event()
        fetcher = make_fetcher(resources, gate=gate)
        resolver = StringRefResolver(fetcher)

        first = asyncio.create_task(resolver.initialize())
        second = asyncio.create_task(resolver.initialize())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert resolver.state == ResolverState.LOADING

        gate.set()
        states = await asyncio.gather(first, second)

        assert states == [ResolverState.READY, ResolverState.READY]
        assert fetcher.calls == {'dialog.tlk': 1, 'custom.tlk': 1}

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_abort_load(self, resources, make_fetcher):
        gate = asyncio.Event()
        fetcher = make_fetcher(resources, gate=gate)
        resolver = StringRefResolver(fetcher)

        waiter = asyncio.create_task(resolver.initialize())
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        gate.set()
        assert await resolver.initialize() == ResolverState.READY
        assert resolver.resolve('500') == 'Longsword'
        assert fetcher.calls == {'dialog.tlk': 1, 'custom.tlk': 1}

    @pytest.mark.asyncio
    async def test_fetch_failure_falls_back(self, resources, make_fetcher):
        del resources['custom.tlk']
        fetcher = make_fetcher(resources)
        resolver = StringRefResolver(fetcher)

        state = await resolver.initialize()

        assert state == ResolverState.READY_WITH_FALLBACK
        assert resolver.is_ready
        assert resolver.table_sizes() == {'standard': 0, 'custom': 0}
        assert 'custom.tlk' in resolver.error
        # Standard table loaded fine but is discarded too
        assert resolver.resolve('500') == '500'

    @pytest.mark.asyncio
    async def test_malformed_payload_falls_back(self, resources, make_fetcher):
        resources['dialog.tlk'] = b'not a string table'
        resolver = StringRefResolver(make_fetcher(resources))

        assert await resolver.initialize() == ResolverState.READY_WITH_FALLBACK

    @pytest.mark.asyncio
    async def test_fallback_never_retries(self, resources, make_fetcher):
        del resources['dialog.tlk']
        fetcher = make_fetcher(resources)
        resolver = StringRefResolver(fetcher)

        await resolver.initialize()
        await resolver.initialize()

        assert fetcher.calls['dialog.tlk'] == 1
        assert resolver.state == ResolverState.READY_WITH_FALLBACK

    @pytest.mark.asyncio
    async def test_custom_resource_names(self, resources, make_fetcher):
        resources['english.tlk'] = resources.pop('dialog.tlk')
        fetcher = make_fetcher(resources)
        resolver = StringRefResolver(fetcher, standard_name='english.tlk')

        assert await resolver.initialize() == ResolverState.READY
        assert resolver.resolve(500) == 'Longsword'


class TestResolve:
    """Test reference resolution once tables are loaded"""

    @pytest.mark.asyncio
    async def test_standard_and_custom(self, resolver):
        await resolver.initialize()

        assert resolver.resolve('500') == 'Longsword'
        assert resolver.resolve(str(CUSTOM_TLK_OFFSET + 1)) == 'CustomSword'
        assert resolver.resolve('16777217') == 'CustomSword'
        assert resolver.resolve('999') == '999'

    @pytest.mark.asyncio
    async def test_numeric_input(self, resolver):
        await resolver.initialize()

        assert resolver.resolve(500) == 'Longsword'
        assert resolver.resolve(500.0) == 'Longsword'
        assert resolver.resolve(999.0) == '999'

    @pytest.mark.asyncio
    async def test_custom_miss_returns_numeral(self, resolver):
        await resolver.initialize()

        assert resolver.resolve(CUSTOM_TLK_OFFSET + 500) == str(CUSTOM_TLK_OFFSET + 500)
        assert resolver.resolve(CUSTOM_TLK_OFFSET) == str(CUSTOM_TLK_OFFSET)

    @pytest.mark.asyncio
    async def test_id_zero(self, resolver):
        await resolver.initialize()
        assert resolver.resolve('0') == 'Bad Strref'

    @pytest.mark.asyncio
    async def test_unparsable_returned_unchanged(self, resolver):
        await resolver.initialize()

        assert resolver.resolve('abc') == 'abc'
        assert resolver.resolve('-5') == '-5'
        assert resolver.resolve('') == ''

    @pytest.mark.asyncio
    async def test_idempotent(self, resolver):
        await resolver.initialize()

        assert resolver.resolve('500') == resolver.resolve('500')
        assert resolver.resolve('16777217') == resolver.resolve('16777217')

    @pytest.mark.asyncio
    async def test_resolve_many(self, resolver):
        await resolver.initialize()

        assert resolver.resolve_many(['500', '999']) == {'500': 'Longsword', '999': '999'}
