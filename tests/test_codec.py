import pytest

from docsidecar.state import codec


def test_dumps_is_deterministic_and_commented():
    text = codec.dumps({"zeta": 1, "alpha": {"b": 2, "a": 1}})

    assert text.startswith(codec.HEADER)
    assert text.index('"alpha"') < text.index('"zeta"')
    assert text == codec.dumps({"alpha": {"a": 1, "b": 2}, "zeta": 1})


def test_loads_skips_leading_comments():
    text = "-- written by hand\n-- second line\n{\"page\": 3}\n"
    assert codec.loads(text) == {"page": 3}


def test_loads_rejects_non_mapping_roots():
    with pytest.raises(codec.SidecarDecodeError):
        codec.loads(codec.HEADER + "[1, 2, 3]\n")
    with pytest.raises(codec.SidecarDecodeError):
        codec.loads(codec.HEADER)


def test_loads_rejects_legacy_lua_syntax():
    with pytest.raises(ValueError):
        codec.loads('-- we can read Lua syntax here!\nreturn {\n    ["page"] = 3,\n}\n')


def test_loads_rejects_runaway_nesting():
    with pytest.raises(codec.SidecarDecodeError):
        codec.loads(codec.HEADER + '{"a":' + "[" * 200_000)
