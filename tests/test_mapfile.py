import pytest

from lasforge.mapfile import map_file, unmap_file

CONTENT = bytes(range(256)) * 4


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(CONTENT)
    return path


def test_map_from_start(sample):
    ctx = map_file(str(sample), True, 0, 16)
    try:
        assert ctx.data() == CONTENT[:16]
        assert len(ctx) == 16
        assert ctx.addr() is not None
    finally:
        unmap_file(ctx)


def test_map_unaligned_offset(sample):
    ctx = map_file(sample, True, 100, 50)
    try:
        assert ctx.data() == CONTENT[100:150]
    finally:
        unmap_file(ctx)


def test_unmap_resets_state(sample):
    ctx = map_file(sample, True, 0, 8)
    result = unmap_file(ctx)
    assert result.mapping is None
    assert result.size == 0
    assert result.fd == -1
    with pytest.raises(ValueError):
        result.data()


def test_context_manager_unmaps(sample):
    with map_file(sample, True, 10, 4) as ctx:
        assert ctx.data() == CONTENT[10:14]
    assert ctx.addr() is None
    assert ctx.fd == -1


def test_read_only_required(sample):
    with pytest.raises(ValueError):
        map_file(sample, False, 0, 4)


def test_missing_file(tmp_path):
    with pytest.raises(OSError):
        map_file(tmp_path / "absent.bin", True, 0, 4)


def test_map_beyond_end_fails(sample):
    with pytest.raises(OSError):
        map_file(sample, True, 0, len(CONTENT) * 10)


def test_zero_size_fails(sample):
    with pytest.raises(OSError):
        map_file(sample, True, 0, 0)


def test_unmap_twice_fails(sample):
    ctx = map_file(sample, True, 0, 4)
    unmap_file(ctx)
    with pytest.raises(OSError):
        unmap_file(ctx)


def test_unmap_with_exported_view_fails_but_closes_fd(sample):
    ctx = map_file(sample, True, 0, 4)
    mapping = ctx.mapping
    view = memoryview(mapping)
    with pytest.raises(OSError):
        unmap_file(ctx)
    assert ctx.fd == -1
    assert ctx.mapping is mapping
    view.release()
    mapping.close()
    assert mapping.closed is True