from bond_valuation_engine.config import DEFAULT_CONFIG, EngineConfig


def test_defaults():
    cfg = EngineConfig()
    assert cfg == DEFAULT_CONFIG
    assert (cfg.face_value, cfg.coupon_rate, cfg.ytm, cfg.years, cfg.frequency) == (100.0, 8.6, 6.5, 5.0, 2)
    assert cfg.par_tolerance == 0.01
    assert cfg.allowed_frequencies == (1, 2, 4, 12)


def test_default_parameters():
    params = DEFAULT_CONFIG.default_parameters()
    assert params.periods == 10
    assert params.coupon_rate == 8.6


def test_from_env_overrides(monkeypatch):
    monkeypatch.setenv("BOND_ENGINE_YTM", "7.25")
    monkeypatch.setenv("BOND_ENGINE_FREQUENCY", "4")
    monkeypatch.setenv("BOND_ENGINE_ALLOWED_FREQUENCIES", "1, 4")
    monkeypatch.setenv("BOND_ENGINE_INPUT_DEBOUNCE_SECONDS", "0.5")
    cfg = EngineConfig.from_env()
    assert cfg.ytm == 7.25
    assert cfg.frequency == 4
    assert cfg.allowed_frequencies == (1, 4)
    assert cfg.input_debounce_seconds == 0.5
    assert cfg.coupon_rate == 8.6


def test_from_env_bad_values_fall_back(monkeypatch):
    monkeypatch.setenv("BOND_ENGINE_PAR_TOLERANCE", "tight")
    monkeypatch.setenv("BOND_ENGINE_FREQUENCY", "2.5")
    monkeypatch.setenv("BOND_ENGINE_ALLOWED_FREQUENCIES", "a,b")
    cfg = EngineConfig.from_env()
    assert cfg.par_tolerance == 0.01
    assert cfg.frequency == 2
    assert cfg.allowed_frequencies == (1, 2, 4, 12)


def test_from_env_non_finite_values_fall_back(monkeypatch):
    monkeypatch.setenv("BOND_ENGINE_PAR_TOLERANCE", "nan")
    monkeypatch.setenv("BOND_ENGINE_FACE_VALUE", "inf")
    monkeypatch.setenv("BOND_ENGINE_INPUT_DEBOUNCE_SECONDS", "-inf")
    cfg = EngineConfig.from_env()
    assert cfg.par_tolerance == 0.01
    assert cfg.face_value == 100.0
    assert cfg.input_debounce_seconds == 0.3
