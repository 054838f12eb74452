# [TESTER] v1

from __future__ import annotations

import pytest

from fillreactor.integration.config import ReactorConfig, load_config

ADDRESS = "0x" + "ee" * 20


def test_defaults() -> None:
    config = ReactorConfig(address=ADDRESS.upper().replace("0X", "0x"))
    assert config.address == ADDRESS
    assert config.max_fee_bps == 5
    assert config.max_batch_size == 256
    assert config.max_order_bytes == 32_000


def test_validation() -> None:
    with pytest.raises(ValueError):
        ReactorConfig(address="0x1234")
    with pytest.raises(ValueError):
        ReactorConfig(address=ADDRESS, max_fee_bps=10_001)
    with pytest.raises(ValueError):
        ReactorConfig(address=ADDRESS, max_batch_size=0)
    with pytest.raises(ValueError):
        ReactorConfig(address=ADDRESS, chain_id="")


def test_from_env() -> None:
    env = {
        "FILLREACTOR_ADDRESS": ADDRESS,
        "FILLREACTOR_CHAIN_ID": "testnet-7",
        "FILLREACTOR_MAX_BATCH_SIZE": "8",
        "UNRELATED": "1",
    }
    config = ReactorConfig.from_env(env)
    assert config.chain_id == "testnet-7"
    assert config.max_batch_size == 8
    assert config.max_fee_bps == 5


def test_from_env_errors() -> None:
    with pytest.raises(ValueError):
        ReactorConfig.from_env({})
    with pytest.raises(ValueError):
        ReactorConfig.from_env({"FILLREACTOR_ADDRESS": ADDRESS, "FILLREACTOR_MAX_FEE_BPS": "five"})


def test_load_config_yaml(tmp_path) -> None:
    path = tmp_path / "reactor.yaml"
    path.write_text(f'address: "{ADDRESS}"\nchain_id: "yaml-chain"\nmax_fee_bps: 3\n', encoding="utf-8")
    config = load_config(path)
    assert config == ReactorConfig(address=ADDRESS, chain_id="yaml-chain", max_fee_bps=3)


def test_load_config_rejects_unknown_keys_and_non_mappings(tmp_path) -> None:
    path = tmp_path / "reactor.yaml"
    path.write_text(f'address: "{ADDRESS}"\nmax_fees: 3\n', encoding="utf-8")
    with pytest.raises(ValueError, match="max_fees"):
        load_config(path)
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)
    path.write_text("chain_id: x\n", encoding="utf-8")
    with pytest.raises(ValueError, match="address"):
        load_config(path)
