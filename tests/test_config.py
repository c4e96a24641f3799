from __future__ import annotations

import os
from pathlib import Path

import pytest

from termfolio import config


@pytest.fixture
def tmp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def data_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data = tmp_path / "termfolio_data_home"
    data.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("TERMFOLIO_DATA_HOME", str(data))
    return data


def test_get_data_root_prefers_termfolio_data_home(data_home: Path) -> None:
    """
    TERMFOLIO_DATA_HOME wins when present.
    """
    assert config.get_data_root() == data_home


def test_get_data_root_defaults_to_local_share_and_ignores_xdg(
    tmp_home: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("TERMFOLIO_DATA_HOME", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_home / "xdg_should_be_ignored"))

    expected = Path(os.path.expanduser("~")) / ".local" / "share"
    assert config.get_data_root() == expected
    assert expected.is_dir()


def test_db_and_log_paths_are_under_data_root(data_home: Path) -> None:
    root = config.get_data_root()
    assert config.default_db_path(root) == data_home / "termfolio" / "portfolio.db"
    assert config.logs_dir(root) == data_home / "termfolio" / "logs"


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Terminal Portfolio", "terminal-portfolio"),
        ("  RapidPhotoFlow!! ", "rapidphotoflow"),
        ("a__b--c", "a-b-c"),
        ("!!!", "project"),
    ],
)
def test_slugify(name: str, expected: str) -> None:
    assert config.slugify(name) == expected


def test_yaml_config_get_path_walks_nested_mappings() -> None:
    cfg = config.YAMLConfig(
        {"source": {"mode": "http", "api_url": "http://x"}, "ui": "broken"}
    )
    assert cfg.get_path("source.mode") == "http"
    assert cfg.get_path("source.missing", "d") == "d"
    assert cfg.get_path("source.mode.deeper", "d") == "d"
    assert cfg.get_path("", "d") == "d"
    assert cfg.source == {"mode": "http", "api_url": "http://x"}
    # non-dict ui section is ignored
    assert cfg.ui == {}
    assert cfg.system == {}


def test_packaged_system_config_has_expected_sections() -> None:
    cfg = config.load_system_config()

    assert cfg.get_path("system.prompt")
    assert cfg.get_path("system.welcome.enabled") is True
    assert cfg.get_path("source.mode") == "local"
    assert cfg.get_path("themes.default") == "matrix"

    palettes = cfg.get_path("themes.palettes")
    assert {"matrix", "dracula", "monokai", "light"} <= set(palettes)
    assert "the-grid" in cfg.get_path("themes.secret")


def test_packaged_portfolio_defaults_have_projects_and_about() -> None:
    data = config.load_portfolio_defaults()

    assert data["about"]["name"]
    slugs = [p["slug"] for p in data["projects"]]
    assert "terminal-portfolio" in slugs
    assert len(slugs) == len(set(slugs))


def test_load_defaults_yaml_missing_file_raises() -> None:
    with pytest.raises(FileNotFoundError):
        config.load_defaults_yaml("nope.yaml")


def test_load_portfolio_file_validates_shape(tmp_path: Path) -> None:
    good = tmp_path / "good.yaml"
    good.write_text(
        "about:\n  name: Ada\nprojects:\n  - name: Engine\n",
        encoding="utf-8",
    )
    assert config.load_portfolio_file(good)["projects"][0]["name"] == "Engine"

    bad_projects = tmp_path / "bad.yaml"
    bad_projects.write_text("projects: nope\n", encoding="utf-8")
    with pytest.raises(ValueError):
        config.load_portfolio_file(bad_projects)

    bad_about = tmp_path / "bad_about.yaml"
    bad_about.write_text("about: [1, 2]\n", encoding="utf-8")
    with pytest.raises(ValueError):
        config.load_portfolio_file(bad_about)

    not_mapping = tmp_path / "list.yaml"
    not_mapping.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        config.load_portfolio_file(not_mapping)

    with pytest.raises(FileNotFoundError):
        config.load_portfolio_file(tmp_path / "missing.yaml")
