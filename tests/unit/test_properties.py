"""Unit tests for property tables and override resolution."""

import pytest

from platctx.errors import ConfigError
from platctx.properties import (
    OS_NAME_PROP,
    OS_TYPE_OVERRIDE_PROP,
    SYSTEM_PROPERTIES,
    PropertyTable,
    env_name_for,
    is_blank,
    resolve_property,
)


class TestResolveProperty:
    """Tests for override-then-fallback precedence."""

    def test_override_wins(self):
        props = {"platctx.osType": "windows", "os.name": "Linux"}
        assert resolve_property(props, OS_TYPE_OVERRIDE_PROP, OS_NAME_PROP) == "windows"

    def test_blank_override_falls_back(self):
        props = {"platctx.osType": "   ", "os.name": "Linux"}
        assert resolve_property(props, OS_TYPE_OVERRIDE_PROP, OS_NAME_PROP) == "Linux"

    def test_missing_override_falls_back(self):
        assert resolve_property({"os.name": "Linux"}, OS_TYPE_OVERRIDE_PROP, OS_NAME_PROP) == "Linux"

    def test_both_missing_is_none(self):
        assert resolve_property({}, OS_TYPE_OVERRIDE_PROP, OS_NAME_PROP) is None

    def test_no_fallback_name(self):
        assert resolve_property({"os.name": "Linux"}, OS_TYPE_OVERRIDE_PROP) is None

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("")
        assert is_blank(" \t")
        assert not is_blank("x")


class TestEnvNames:
    """Tests for override property environment variable names."""

    @pytest.mark.parametrize("prop,env", [
        ("platctx.osType", "PLATCTX_OS_TYPE"),
        ("platctx.currentUser", "PLATCTX_CURRENT_USER"),
        ("platctx.runtimeVersion", "PLATCTX_RUNTIME_VERSION"),
        ("platctx.constrainedRuntime", "PLATCTX_CONSTRAINED_RUNTIME"),
        ("platctx.alternateVM", "PLATCTX_ALTERNATE_VM"),
    ])
    def test_override_env_names(self, prop, env):
        assert env_name_for(prop) == env

    def test_system_property_has_no_env_name(self):
        assert env_name_for("os.name") is None


class TestPropertyTable:
    """Tests for the layered property table."""

    def test_explicit_beats_environment(self):
        table = PropertyTable(
            {"platctx.osType": "windows"},
            environ={"PLATCTX_OS_TYPE": "mac os x"},
            system_properties={},
        )
        assert table["platctx.osType"] == "windows"

    def test_environment_supplies_override(self):
        table = PropertyTable(environ={"PLATCTX_OS_TYPE": "windows"}, system_properties={})
        assert table.get("platctx.osType") == "windows"

    def test_environment_not_used_for_system_names(self):
        table = PropertyTable(environ={"OS_NAME": "Windows"}, system_properties={})
        assert table.get("os.name") is None

    def test_system_provider_is_called_each_time(self):
        calls = []

        def provider():
            calls.append(1)
            return "Linux"

        table = PropertyTable(environ={}, system_properties={"os.name": provider})
        assert table["os.name"] == "Linux"
        assert table["os.name"] == "Linux"
        assert len(calls) == 2

    def test_failing_provider_is_absent(self):
        def provider():
            raise OSError("no login")

        table = PropertyTable(environ={}, system_properties={"user.name": provider})
        assert table.get("user.name") is None
        with pytest.raises(KeyError):
            table["user.name"]

    def test_nested_properties_are_flattened(self):
        table = PropertyTable(
            {"platctx": {"osType": "windows", "alternateVM": True}},
            environ={},
            system_properties={},
        )
        assert table["platctx.osType"] == "windows"
        assert table["platctx.alternateVM"] == "true"

    def test_iteration_lists_present_names(self):
        table = PropertyTable(
            {"custom.name": "x"},
            environ={"PLATCTX_CURRENT_USER": "jdoe", "UNRELATED": "1"},
            system_properties={"os.name": lambda: "Linux", "user.dir": lambda: None},
        )
        assert set(table) == {"custom.name", "platctx.currentUser", "os.name"}
        assert len(table) == 3

    def test_with_properties_keeps_layers(self):
        table = PropertyTable(environ={}, system_properties={"os.name": lambda: "Linux"})
        updated = table.with_properties({"platctx.osType": "windows"})
        assert updated["platctx.osType"] == "windows"
        assert updated["os.name"] == "Linux"
        assert table.get("platctx.osType") is None

    def test_system_properties_are_the_resolved_ones(self):
        assert set(SYSTEM_PROPERTIES) == {
            "os.name", "os.release", "os.version", "os.platform",
            "user.name", "user.dir",
            "runtime.version", "runtime.name", "runtime.vm.name", "runtime.build",
        }

    def test_default_system_properties(self):
        table = PropertyTable(environ={})
        assert table["os.name"]
        assert table["runtime.version"][0].isdigit()


class TestYamlLoading:
    """Tests for loading properties from YAML files."""

    def test_load_flat_and_nested(self, tmp_path):
        config = tmp_path / "props.yml"
        config.write_text(
            "platctx:\n"
            "  osType: Windows 10\n"
            "  runtimeVersion: '1.8.0_362-b09'\n"
            "user.name: builder\n"
            "ignored: null\n",
            encoding="utf-8",
        )
        table = PropertyTable.from_yaml(config, environ={}, system_properties={})
        assert table["platctx.osType"] == "Windows 10"
        assert table["platctx.runtimeVersion"] == "1.8.0_362-b09"
        assert table["user.name"] == "builder"
        assert "ignored" not in table

    def test_empty_file_is_empty_table(self, tmp_path):
        config = tmp_path / "empty.yml"
        config.write_text("", encoding="utf-8")
        table = PropertyTable.from_yaml(config, environ={}, system_properties={})
        assert len(table) == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            PropertyTable.from_yaml(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "bad.yml"
        config.write_text("platctx: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            PropertyTable.from_yaml(config)

    def test_non_mapping_document(self, tmp_path):
        config = tmp_path / "list.yml"
        config.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            PropertyTable.from_yaml(config)

    def test_list_value_rejected(self, tmp_path):
        config = tmp_path / "listval.yml"
        config.write_text("os.name: [a, b]\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="scalar"):
            PropertyTable.from_yaml(config)
