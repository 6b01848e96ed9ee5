import yaml

from ledger_recon.config import (
    ReconConfig,
    generate_default_config,
    get_default_config,
    load_config,
)


def test_defaults():
    config = ReconConfig()

    assert config.matching.close_match_days == 30
    assert config.matching.exact_match_days == 10
    assert config.matching.amount_tolerance == 0.01
    assert [(t.name, t.enabled) for t in config.matching.tiers] == [
        ("date_amount", True),
        ("check_number", False),
    ]
    assert config.input.bank.account_field == "Account Number"
    assert config.input.internal.description_field == "Description1"


def test_default_dict_matches_model_defaults():
    assert ReconConfig(**get_default_config()) == ReconConfig()


def test_load_config_without_file_uses_defaults():
    config = load_config(None)

    assert config.config_file_path is None
    assert config.matching.close_match_days == 30


def test_load_config_merges_user_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "input": {"bank": {"account_field": "Acct #"}},
                "matching": {"close_match_days": 15, "amount_tolerance": 0.05},
            }
        )
    )

    config = load_config(path)

    assert config.input.bank.account_field == "Acct #"
    assert config.input.bank.date_field == "Date"
    assert config.matching.close_match_days == 15
    assert config.matching.amount_tolerance == 0.05
    assert len(config.matching.tiers) == 2
    assert config.config_file_path == str(path)


def test_generated_config_round_trips(tmp_path):
    path = tmp_path / "nested" / "config.yaml"

    generate_default_config(path)
    config = load_config(path)

    assert path.read_text().startswith("#")
    assert config.matching == ReconConfig().matching
    assert config.input == ReconConfig().input
