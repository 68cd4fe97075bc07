import logging

import pytest

from precog.chain.registry import (
    CHAINS,
    HARDHAT_CHAIN_ID,
    ChainConfig,
    get_chain_config,
    resolve_chain,
    resolve_target_network_set,
)
from precog.chain.transport import (
    AlchemyProvider,
    ChainClientConfig,
    QuickNodeProvider,
    RpcProvider,
    StaticUrlProvider,
    TransportResolver,
)
from precog.config import Settings
from precog.errors import UnknownChainError


def _resolver(alchemy_key="", quicknode=("", ""), overrides=None, **kwargs):
    providers = [
        StaticUrlProvider(overrides or {}),
        QuickNodeProvider(*quicknode),
        AlchemyProvider(alchemy_key),
    ]
    return TransportResolver(providers, **kwargs)


# --- target network set ---


def test_target_set_keeps_existing_mainnet():
    assert resolve_target_network_set([10, 1]) == (10, 1)


def test_target_set_appends_mainnet():
    assert resolve_target_network_set([10]) == (10, 1)
    assert resolve_target_network_set([]) == (1,)


def test_target_set_preserves_other_duplicates():
    assert resolve_target_network_set([10, 10]) == (10, 10, 1)
    assert resolve_target_network_set([1, 8453, 1]) == (1, 8453, 1)


def test_settings_target_network_set():
    settings = Settings(_env_file=None, target_networks=[84532])
    assert settings.target_network_set == (84532, 1)
    assert settings.default_chain_id == 84532


# --- chain table ---


def test_resolve_chain_by_name_and_id():
    assert resolve_chain("base").chain_id == 8453
    assert resolve_chain("84532").name == "base-sepolia"
    assert resolve_chain(1).name == "ethereum"


def test_unknown_chain_lookup_raises():
    with pytest.raises(UnknownChainError):
        get_chain_config(999)
    with pytest.raises(UnknownChainError):
        resolve_chain("nowhere")


# --- providers ---


def test_alchemy_url():
    assert AlchemyProvider("key").try_resolve(8453) == "https://base-mainnet.g.alchemy.com/v2/key"


def test_alchemy_skipped_without_key_or_slug():
    assert AlchemyProvider("").try_resolve(8453) is None
    assert AlchemyProvider("key").try_resolve(HARDHAT_CHAIN_ID) is None
    assert AlchemyProvider("key").try_resolve(999) is None


def test_quicknode_urls():
    provider = QuickNodeProvider("my-ep", "tok")
    assert provider.try_resolve(1) == "https://my-ep.quiknode.pro/tok/"
    assert provider.try_resolve(84532) == "https://my-ep.base-sepolia.quiknode.pro/tok/"


def test_quicknode_skipped_without_credentials():
    assert QuickNodeProvider("", "tok").try_resolve(1) is None
    assert QuickNodeProvider("my-ep", "").try_resolve(1) is None
    assert QuickNodeProvider("my-ep", "tok").try_resolve(HARDHAT_CHAIN_ID) is None


def test_static_provider_ignores_empty_urls():
    provider = StaticUrlProvider({"8453": "https://rpc.example", 10: ""})
    assert provider.try_resolve(8453) == "https://rpc.example"
    assert provider.try_resolve(10) is None


# --- resolution order ---


def test_primary_provider_wins():
    resolver = _resolver(alchemy_key="key", quicknode=("ep", "tok"))
    assert resolver.resolve_transport_url(8453) == "https://ep.base-mainnet.quiknode.pro/tok/"


def test_secondary_provider_when_primary_missing():
    resolver = _resolver(alchemy_key="key")
    assert resolver.resolve_transport_url(8453) == "https://base-mainnet.g.alchemy.com/v2/key"


def test_public_fallback_without_credentials():
    assert _resolver().resolve_transport_url(8453) == CHAINS[8453].public_rpc_url


def test_override_beats_managed_providers():
    resolver = _resolver(alchemy_key="key", overrides={8453: "https://mine.example"})
    assert resolver.resolve_transport_url(8453) == "https://mine.example"


def test_no_endpoint_at_all_raises():
    with pytest.raises(UnknownChainError):
        _resolver(alchemy_key="key").resolve_transport_url(999)


def test_custom_provider_interface():
    class Fixed(RpcProvider):
        name = "fixed"

        def try_resolve(self, chain_id):
            return "https://fixed.example" if chain_id == 10 else None

    resolver = TransportResolver([Fixed(), AlchemyProvider("key")])
    assert resolver.resolve_transport_url(10) == "https://fixed.example"
    assert resolver.resolve_transport_url(8453) == "https://base-mainnet.g.alchemy.com/v2/key"


def test_custom_chain_table():
    chains = {5000: ChainConfig(chain_id=5000, name="custom", native_token="X", public_rpc_url="https://c.example")}
    resolver = TransportResolver([AlchemyProvider("key", chains)], chains=chains)
    assert resolver.resolve_transport_url(5000) == "https://c.example"


def test_transport_candidates_in_priority_order():
    resolver = _resolver(alchemy_key="key", quicknode=("ep", "tok"))
    assert resolver.transport_candidates(8453) == (
        "https://ep.base-mainnet.quiknode.pro/tok/",
        "https://base-mainnet.g.alchemy.com/v2/key",
        "https://mainnet.base.org",
    )


def test_transport_candidates_deduplicated():
    resolver = _resolver(overrides={8453: "https://mainnet.base.org"})
    assert resolver.transport_candidates(8453) == ("https://mainnet.base.org",)
    assert resolver.transport_candidates(999) == ()


# --- client config ---


def test_local_chain_has_polling_disabled():
    config = _resolver().build_client_config(HARDHAT_CHAIN_ID)
    assert config.polling_interval_ms is None
    assert not config.polling_enabled
    assert config.transport_url == "http://127.0.0.1:8545"


def test_other_chains_poll_at_configured_interval():
    config = _resolver(polling_interval_ms=4000).build_client_config(84532)
    assert config == ChainClientConfig(
        chain_id=84532,
        transport_url="https://sepolia.base.org",
        polling_interval_ms=4000,
        fallback_urls=("https://sepolia.base.org",),
    )
    assert config.polling_enabled


def test_default_polling_interval():
    assert _resolver().build_client_config(1).polling_interval_ms == 30_000


def test_custom_local_chain_id():
    resolver = _resolver(local_chain_id=8453)
    assert resolver.build_client_config(8453).polling_interval_ms is None
    assert resolver.build_client_config(HARDHAT_CHAIN_ID).polling_interval_ms == 30_000


def test_client_config_is_frozen():
    config = _resolver().build_client_config(1)
    with pytest.raises(AttributeError):
        config.transport_url = "https://other.example"


def test_from_settings():
    settings = Settings(
        _env_file=None,
        alchemy_api_key="key",
        rpc_overrides={10: "https://op.example"},
        polling_interval_ms=1000,
    )
    resolver = TransportResolver.from_settings(settings)
    assert resolver.resolve_transport_url(8453) == "https://base-mainnet.g.alchemy.com/v2/key"
    assert resolver.resolve_transport_url(10) == "https://op.example"
    assert resolver.build_client_config(1).polling_interval_ms == 1000


def test_from_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("QUICKNODE_ENDPOINT_NAME", "ep")
    monkeypatch.setenv("QUICKNODE_API_KEY", "tok")
    monkeypatch.setenv("RPC_OVERRIDES", '{"1": "https://eth.example"}')
    resolver = TransportResolver.from_settings()
    assert resolver.resolve_transport_url(1) == "https://eth.example"
    assert resolver.resolve_transport_url(10) == "https://ep.optimism.quiknode.pro/tok/"


def test_public_fallback_logs_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="precog.chain.transport"):
        _resolver().resolve_transport_url(8453)
    assert "no managed provider" in caplog.text


def test_managed_provider_does_not_warn(caplog):
    with caplog.at_level(logging.WARNING, logger="precog.chain.transport"):
        _resolver(alchemy_key="key").resolve_transport_url(8453)
    assert caplog.text == ""
