"""
Tests for the model settings registry.

Run with: pytest tests/test_settings.py -v
"""

import pytest

from bayesup import Model, SettingsNotFoundError
from bayesup.settings import (
    MAX_NAME_LENGTH,
    SettingsGroup,
    model_add_group,
    settings_add_group,
    settings_copy_group,
    settings_free_all,
    settings_get_group,
    settings_rm_group,
)


class CountingGroup(SettingsGroup):
    """Test group that records copies and releases."""
    settings_name = "counting"
    released = 0

    def __init__(self, value=0):
        self.value = value

    def copy(self):
        return CountingGroup(self.value)

    def release(self):
        CountingGroup.released += 1


@pytest.fixture(autouse=True)
def reset_counts():
    CountingGroup.released = 0


# ============================================================================
# ATTACH / GET / REMOVE
# ============================================================================

class TestRoundtrip:

    def test_attach_then_get(self):
        m = Model(name="m")
        g = CountingGroup(3)
        model_add_group(m, g)
        assert settings_get_group(m, "counting") is g

    def test_remove_then_get(self):
        m = Model(name="m")
        model_add_group(m, CountingGroup())
        settings_rm_group(m, "counting")
        assert settings_get_group(m, "counting") is None
        assert CountingGroup.released == 1

    def test_remove_absent_is_noop(self):
        m = Model(name="m")
        settings_rm_group(m, "nothing")
        model_add_group(m, CountingGroup())
        settings_rm_group(m, "nothing")
        assert settings_get_group(m, "counting") is not None

    def test_model_without_settings(self):
        assert settings_get_group(Model(name="m"), "counting") is None

    def test_replacing_releases_old_group(self):
        m = Model(name="m")
        model_add_group(m, CountingGroup(1))
        new = model_add_group(m, CountingGroup(2))
        assert CountingGroup.released == 1
        assert settings_get_group(m, "counting") is new
        assert len(m.settings) == 1

    def test_replacing_keeps_position(self):
        m = Model(name="m")
        settings_add_group(m, "a", {"v": 1})
        model_add_group(m, CountingGroup(1))
        settings_add_group(m, "c", {"v": 3})
        new = model_add_group(m, CountingGroup(2))
        assert list(m.settings) == ["a", "counting", "c"]
        assert settings_get_group(m, "counting") is new
        assert CountingGroup.released == 1

    def test_remove_keeps_order(self):
        m = Model(name="m")
        for name in ("a", "b", "c"):
            settings_add_group(m, name, {"name": name})
        settings_rm_group(m, "b")
        assert list(m.settings) == ["a", "c"]

    def test_long_names_truncated(self):
        m = Model(name="m")
        long_name = "x" * (MAX_NAME_LENGTH + 20)
        g = settings_add_group(m, long_name, {})
        assert settings_get_group(m, long_name) is g
        assert list(m.settings) == ["x" * MAX_NAME_LENGTH]


# ============================================================================
# COPY
# ============================================================================

class TestCopy:

    def test_copy_is_independent(self):
        src, dst = Model(name="src"), Model(name="dst")
        model_add_group(src, CountingGroup(1))
        copied = settings_copy_group(dst, src, "counting")
        assert copied is not settings_get_group(src, "counting")
        copied.value = 99
        assert settings_get_group(src, "counting").value == 1

    def test_copy_without_copy_fn_aliases(self):
        src, dst = Model(name="src"), Model(name="dst")
        shared = {"n": 1}
        settings_add_group(src, "shared", shared)
        assert settings_copy_group(dst, src, "shared") is shared

    def test_missing_name_raises_with_name(self):
        src, dst = Model(name="src"), Model(name="dst")
        model_add_group(src, CountingGroup())
        with pytest.raises(SettingsNotFoundError) as excinfo:
            settings_copy_group(dst, src, "absent")
        assert excinfo.value.name == "absent"

    def test_source_without_settings_raises(self):
        with pytest.raises(SettingsNotFoundError):
            settings_copy_group(Model(name="dst"), Model(name="src"), "counting")

    def test_empty_name_copies_all(self):
        src, dst = Model(name="src"), Model(name="dst")
        model_add_group(src, CountingGroup(5))
        settings_add_group(src, "plain", [1, 2])
        settings_copy_group(dst, src, "")
        assert settings_get_group(dst, "counting").value == 5
        assert settings_get_group(dst, "plain") == [1, 2]


# ============================================================================
# RELEASE
# ============================================================================

class TestRelease:

    def test_free_all(self):
        m = Model(name="m")
        model_add_group(m, CountingGroup())
        settings_add_group(m, "borrowed", object())
        settings_free_all(m)
        assert m.settings == {}
        assert CountingGroup.released == 1
