import os

import pytest

from file_bundler.exceptions import BundleKeyCollisionError
from file_bundler.remapping import join_key, prefix_keys, prefixed_key_remapping, remap


@pytest.mark.unit
def test_remap_moves_value_to_new_key() -> None:
    src = {"k1": "v1"}

    out = remap(src, {"k1": "key1"})

    assert out == {"key1": "v1"}
    assert src == {"k1": "v1"}


@pytest.mark.unit
def test_remap_ignores_absent_old_keys() -> None:
    assert remap({"k1": "v1"}, {"missing": "other"}) == {"k1": "v1"}


@pytest.mark.unit
def test_remap_with_empty_mapping_leaves_bundle_unchanged() -> None:
    src = {"a": "1", "b": "2"}

    assert remap(src, {}) == src


@pytest.mark.unit
def test_remap_allows_swapping_keys() -> None:
    assert remap({"a": "1", "b": "2"}, {"a": "b", "b": "a"}) == {"a": "2", "b": "1"}


@pytest.mark.unit
def test_remap_rejects_overwriting_unmapped_key() -> None:
    with pytest.raises(BundleKeyCollisionError) as exc_info:
        remap({"a": "1", "b": "2"}, {"a": "b"})

    assert exc_info.value.key == "b"
    assert exc_info.value.source == "a"


@pytest.mark.unit
def test_remap_rejects_two_keys_with_same_target() -> None:
    with pytest.raises(BundleKeyCollisionError):
        remap({"a": "1", "b": "2"}, {"a": "c", "b": "c"})


@pytest.mark.unit
@pytest.mark.parametrize("prefix", ["FILE", "FILE/", "/FILE"])
def test_join_key_never_leaves_leading_separator(prefix: str) -> None:
    assert join_key(prefix, "bacon.json", http_paths=True) == "FILE/bacon.json"


@pytest.mark.unit
def test_join_key_uses_platform_separator() -> None:
    assert join_key("FILE", "bacon.json") == os.path.join("FILE", "bacon.json")


@pytest.mark.unit
def test_prefixed_key_remapping_covers_every_key() -> None:
    mapping = prefixed_key_remapping({"a": "1", "b": "2"}, "p", http_paths=True)

    assert mapping == {"a": "p/a", "b": "p/b"}


@pytest.mark.unit
def test_prefix_keys_twice_accumulates_prefix() -> None:
    once = prefix_keys({"bacon.json": "x"}, "FILE", http_paths=True)
    twice = prefix_keys(once, "FILE", http_paths=True)

    assert once == {"FILE/bacon.json": "x"}
    assert twice == {"FILE/FILE/bacon.json": "x"}
