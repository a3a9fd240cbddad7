import pytest

from ugolki.config import SearchConfig, preset_search_config


def test_defaults():
    cfg = SearchConfig()
    assert cfg.search_depth == 3
    assert cfg.eval_depth == 2
    assert cfg.poll_interval_ms == 12
    assert cfg.max_plies == 400
    assert cfg.preset == "custom"


@pytest.mark.parametrize(
    "name,search_depth,eval_depth",
    [("fast", 2, 1), ("default", 3, 2), ("strong", 4, 4), ("STRONG", 4, 4)],
)
def test_presets(name, search_depth, eval_depth):
    cfg = preset_search_config(name)
    assert cfg.search_depth == search_depth
    assert cfg.eval_depth == eval_depth
    assert cfg.preset == name.lower()


def test_unknown_preset():
    with pytest.raises(ValueError, match="Unknown search preset 'blitz'"):
        preset_search_config("blitz")


@pytest.mark.parametrize(
    "kwargs",
    [{"search_depth": 0}, {"eval_depth": -1}, {"max_plies": 0}],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        SearchConfig(**kwargs)
