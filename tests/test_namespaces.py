from repository.namespaces import (
    GLOBAL,
    SEP,
    WORKSPACE_PREFIXES,
    is_sandbox_database,
    scoped_key,
)


def test_scoped_key_embeds_project_id_verbatim():
    assert scoped_key("chat", "proj-123") == "vibecoder:chat:proj-123"


def test_missing_or_empty_project_id_uses_global_namespace():
    assert scoped_key("chat") == f"vibecoder:chat:{GLOBAL}"
    assert scoped_key("chat", None) == scoped_key("chat", "")


def test_scoped_key_is_deterministic():
    assert scoped_key("files", "abc") == scoped_key("files", "abc")


def test_distinct_projects_never_collide():
    ids = ["a", "b", "ab", "a-b", "A", "123", "proj_1", "proj_10"]
    keys = {scoped_key("state", pid) for pid in ids}
    assert len(keys) == len(ids)


def test_distinct_pairs_are_injective_when_ids_lack_separator():
    pairs = [("a", "b"), ("a:b", "c"), ("a", "b-c"), ("x", None), ("x", "y")]
    keys = [scoped_key(k, p) for k, p in pairs]
    assert len(set(keys)) == len(keys)
    assert all(SEP not in p for _, p in pairs if p)


def test_scoped_keys_fall_under_a_workspace_prefix():
    key = scoped_key("chat", "p1")
    assert any(key.startswith(prefix) for prefix in WORKSPACE_PREFIXES)


def test_sandbox_database_markers():
    assert is_sandbox_database("sandpack-npm-cache")
    assert is_sandbox_database("CSB_V8_CACHE")
    assert is_sandbox_database("keyval-store")
    assert not is_sandbox_database("user-notes")
