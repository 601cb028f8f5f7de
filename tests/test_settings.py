"""Config loading with profile overlay."""

from pathlib import Path

from predboard.config import get_settings, load_config


def _write(path: Path, text: str) -> None:
    path.write_text(text, encoding="utf-8")


def test_profile_overlay_deep_merges(tmp_path):
    _write(tmp_path / "default.toml", '[polymarket]\npage_size = 100\nmax_pages = 5\n[logging]\nlevel = "INFO"\n')
    _write(tmp_path / "dev.toml", "[polymarket]\nmax_pages = 1\n")
    raw = load_config("dev", tmp_path)
    assert raw["polymarket"] == {"page_size": 100, "max_pages": 1}
    assert raw["logging"]["level"] == "INFO"


def test_missing_profile_uses_defaults(tmp_path):
    _write(tmp_path / "default.toml", "[kalshi]\nevents_limit = 50\n")
    assert get_settings("nope", tmp_path).kalshi_events_limit == 50


def test_no_config_falls_back_to_builtin_defaults(tmp_path):
    s = get_settings(None, tmp_path)
    assert s.polymarket_page_size == 100
    assert s.polymarket_max_pages == 5
    assert s.kalshi_events_limit == 200
    assert s.display_page_size == 24
    assert s.default_fee_rate_bps == 100
    assert s.http_timeout == 30.0


def test_shipped_config_loads():
    root = Path(__file__).resolve().parent.parent / "config"
    s = get_settings("dev", root)
    assert s.polymarket_max_pages == 1
    assert s.logging_level == "DEBUG"
    assert s.chain_id == 137
