"""Tests for Config hierarchy, ScopeConfig validation and paths module"""
import pytest

from scopetag import config as config_module
from scopetag.config import Config, ScopeConfig
from scopetag.errors import InvalidConfigError
from scopetag.paths import ensure_in_repo, find_repo_root, get_repo_config_path


@pytest.fixture
def repo_dir(temp_dir):
    """Provide a directory that looks like a git checkout"""
    (temp_dir / ".git").mkdir()
    return temp_dir


@pytest.fixture
def global_config_path(temp_dir, monkeypatch):
    """Redirect the global config file into the temp directory"""
    path = temp_dir / "global.yaml"
    monkeypatch.setattr(config_module, "GLOBAL_CONFIG_PATH", path)
    return path


class TestRepoRootFinder:
    """Test find_repo_root() function"""

    def test_find_repo_root_in_repo_root(self, repo_dir):
        assert find_repo_root(repo_dir) == repo_dir.resolve()

    def test_find_repo_root_from_subdirectory(self, repo_dir):
        """Test finding repo root from a deep subdirectory"""
        subdir = repo_dir / "services" / "account" / "src"
        subdir.mkdir(parents=True)
        assert find_repo_root(subdir) == repo_dir.resolve()

    def test_git_file_counts_as_root(self, temp_dir):
        """Test worktrees with a .git file are recognised"""
        (temp_dir / ".git").write_text("gitdir: /elsewhere\n")
        assert find_repo_root(temp_dir) == temp_dir.resolve()

    def test_get_repo_config_path(self, repo_dir):
        assert get_repo_config_path(repo_dir) == repo_dir.resolve() / ".scopetag.yaml"

    def test_ensure_in_repo(self, repo_dir):
        assert ensure_in_repo(repo_dir) == repo_dir.resolve()

    def test_ensure_in_repo_outside_checkout(self, temp_dir):
        with pytest.raises(InvalidConfigError):
            ensure_in_repo(temp_dir)


class TestScopeConfig:
    """Test ScopeConfig defaults and validation"""

    def test_defaults(self):
        config = ScopeConfig()
        assert config.branch == "main"
        assert config.pre_release_name is None
        assert config.pre_release_timestamp_layout is None
        assert config.build_metadata is None

    @pytest.mark.parametrize("name", ["rc", "alpha.1", "pre-release", "beta.x-y"])
    def test_valid_pre_release_names(self, name):
        assert ScopeConfig(pre_release_name=name).validate().pre_release_name == name

    @pytest.mark.parametrize("name", ["rc_1", "rc..1", ".rc", "rc.", "r c"])
    def test_invalid_pre_release_names(self, name):
        with pytest.raises(InvalidConfigError):
            ScopeConfig(pre_release_name=name).validate()

    def test_empty_branch_is_invalid(self):
        with pytest.raises(InvalidConfigError):
            ScopeConfig(branch="").validate()


class TestConfigHierarchy:
    """Test Config with hierarchical lookup"""

    def test_save_and_reload(self, temp_dir):
        path = temp_dir / "local.yaml"
        config = Config(config_path=path, enable_hierarchy=False)
        config.branch = "release"
        config.pre_release_name = "rc"
        config.pre_release_timestamp = "epoch"
        config.build_metadata = "ci.1"
        config.save()

        loaded = Config(config_path=path, enable_hierarchy=False)
        assert loaded.branch == "release"
        assert loaded.pre_release_name == "rc"
        assert loaded.pre_release_timestamp == "epoch"
        assert loaded.build_metadata == "ci.1"

    def test_branch_defaults_to_main(self, temp_dir):
        config = Config(config_path=temp_dir / "missing.yaml", enable_hierarchy=False)
        assert config.branch == "main"
        assert config.build_metadata is None

    def test_local_overrides_global(self, temp_dir, global_config_path):
        global_config = Config(enable_hierarchy=False)
        global_config.set("branch", "trunk")
        global_config.set("build_metadata", "global.1")
        global_config.save()

        local_path = temp_dir / "local.yaml"
        local_path.write_text("branch: main\n")

        config = Config(config_path=local_path, enable_hierarchy=True)
        assert config.branch == "main"
        assert config.build_metadata == "global.1"

    def test_numeric_values_are_strings(self, temp_dir):
        """Test YAML scalars such as 42 are handed out as text"""
        path = temp_dir / "local.yaml"
        path.write_text("build_metadata: 42\n")
        assert Config(config_path=path, enable_hierarchy=False).build_metadata == "42"

    def test_malformed_yaml_raises(self, temp_dir):
        path = temp_dir / "bad.yaml"
        path.write_text("branch: [unclosed\n")
        with pytest.raises(InvalidConfigError):
            Config(config_path=path, enable_hierarchy=False)

    def test_non_mapping_raises(self, temp_dir):
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(InvalidConfigError):
            Config(config_path=path, enable_hierarchy=False)

    def test_to_scope_config_overrides(self, temp_dir):
        path = temp_dir / "local.yaml"
        path.write_text("branch: develop\npre_release_name: beta\nbuild_metadata: ci.1\n")
        config = Config(config_path=path, enable_hierarchy=False)
        scope_config = config.to_scope_config(build_metadata="ci.2", pre_release_name=None)
        assert scope_config == ScopeConfig(
            branch="develop",
            pre_release_name="beta",
            pre_release_timestamp_layout=None,
            build_metadata="ci.2",
        )

    def test_to_scope_config_validates(self, temp_dir):
        path = temp_dir / "local.yaml"
        path.write_text("pre_release_name: not_valid\n")
        with pytest.raises(InvalidConfigError):
            Config(config_path=path, enable_hierarchy=False).to_scope_config()


class TestConfigWithRepoContext:
    """Test Config.load_with_repo_context()"""

    def test_in_repo(self, repo_dir, global_config_path):
        (repo_dir / ".scopetag.yaml").write_text("branch: release\n")
        config = Config.load_with_repo_context(start_path=repo_dir)
        assert config.config_path == repo_dir.resolve() / ".scopetag.yaml"
        assert config.enable_hierarchy is True
        assert config.branch == "release"

    def test_outside_repo(self, temp_dir, global_config_path):
        outside = temp_dir / "plain"
        outside.mkdir()
        config = Config.load_with_repo_context(start_path=outside)
        assert config.config_path == global_config_path
        assert config.enable_hierarchy is False
