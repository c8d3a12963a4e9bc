import fakeredis
import pytest

from tcPbnLib.tcPbnCacheLib import PROCESSING, InMemoryResultsCache, JobStatus, RedisResultsCache
from tcPbnLib.tcPbnTypes import ErrorDescriptor, ExtractionResult


class FakeClock:

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _result():
    result = ExtractionResult(event_name='Spring Pairs', board_count=2, success=True)
    result.add_board_set('[Board "1"]\n\n[Board "2"]\n\n')
    result.add_error(ErrorDescriptor(board_number=3, kind='unexpected_status_code', message='Failed to extract Board 3: 404'))
    return result


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_cache(clock):
    return InMemoryResultsCache(processing_ttl=300, result_ttl=900, clock=clock)


@pytest.fixture
def redis_cache():
    return RedisResultsCache(fakeredis.FakeRedis(decode_responses=True), processing_ttl=300, result_ttl=900)


@pytest.fixture(params=['memory', 'redis'])
def cache(request):
    if request.param == 'memory':
        return InMemoryResultsCache(processing_ttl=300, result_ttl=900, clock=FakeClock())
    return RedisResultsCache(fakeredis.FakeRedis(decode_responses=True), processing_ttl=300, result_ttl=900)


def test_unknown_key(cache):
    assert cache.get_status('k') == JobStatus.NOT_FOUND
    assert cache.get('k') == (JobStatus.NOT_FOUND, None)


def test_processing_then_done(cache):
    assert cache.set_processing('k')
    assert cache.get_status('k') == JobStatus.PROCESSING
    assert cache.get('k') == (JobStatus.PROCESSING, None)
    cache.save_result('k', _result())
    status, result = cache.get('k')
    assert status == JobStatus.DONE
    assert result == _result()


def test_second_claim_fails(cache):
    assert cache.set_processing('k')
    assert not cache.set_processing('k')
    assert not cache.set_processing('k', replace_done=True)


def test_claim_over_finished_result_needs_replace_done(cache):
    cache.save_result('k', _result())
    assert not cache.set_processing('k')
    assert cache.get_status('k') == JobStatus.DONE
    assert cache.set_processing('k', replace_done=True)
    assert cache.get_status('k') == JobStatus.PROCESSING


def test_failed_results_are_stored(cache):
    failed = ExtractionResult.failed(ErrorDescriptor(kind='invalid_settings', message='no boards'))
    cache.save_result('k', failed)
    status, result = cache.get('k')
    assert status == JobStatus.DONE
    assert not result.success
    assert result.errors[0].kind == 'invalid_settings'


def test_memory_processing_marker_expires(memory_cache, clock):
    memory_cache.set_processing('k')
    clock.now += 299
    assert memory_cache.get_status('k') == JobStatus.PROCESSING
    clock.now += 1
    assert memory_cache.get_status('k') == JobStatus.NOT_FOUND
    assert memory_cache.set_processing('k')


def test_memory_result_expires(memory_cache, clock):
    memory_cache.set_processing('k')
    clock.now += 200
    memory_cache.save_result('k', _result())
    clock.now += 899
    assert memory_cache.get_status('k') == JobStatus.DONE
    clock.now += 1
    assert memory_cache.get('k') == (JobStatus.NOT_FOUND, None)


def test_redis_ttls(redis_cache):
    redis_cache.set_processing('k')
    assert redis_cache.rdb.get('k') == PROCESSING
    assert 0 < redis_cache.rdb.ttl('k') <= 300
    redis_cache.save_result('k', _result())
    assert 300 < redis_cache.rdb.ttl('k') <= 900


def test_redis_forced_claim_sets_processing_ttl(redis_cache):
    redis_cache.save_result('k', _result())
    assert redis_cache.set_processing('k', replace_done=True)
    assert redis_cache.rdb.get('k') == PROCESSING
    assert 0 < redis_cache.rdb.ttl('k') <= 300


def test_redis_reads_bytes():
    cache = RedisResultsCache(fakeredis.FakeRedis(), processing_ttl=300, result_ttl=900)
    cache.save_result('k', _result())
    status, result = cache.get('k')
    assert status == JobStatus.DONE
    assert result.board_count == 2
    assert cache.set_processing('j')
    assert cache.get_status('j') == JobStatus.PROCESSING
    assert not cache.set_processing('j', replace_done=True)


def test_memory_writes_sweep_expired_entries(memory_cache, clock):
    for i in range(100):
        memory_cache.save_result(f'old-{i}', _result())
    memory_cache.set_processing('stale')
    clock.now += 10000
    memory_cache.save_result('fresh', _result())
    assert list(memory_cache._entries) == ['fresh']
    clock.now += 10000
    assert memory_cache.set_processing('claim')
    assert list(memory_cache._entries) == ['claim']
