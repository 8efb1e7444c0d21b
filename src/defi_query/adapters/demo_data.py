"""Static datasets served when a live source is unconfigured or failing."""

from __future__ import annotations

from ..constants import Chain
from ..domain import MarketStats, PoolStats, ReserveRates, VaultStats

AAVE_RESERVES: dict[Chain, list[ReserveRates]] = {
    Chain.BASE: [
        ReserveRates("USDC", "USD Coin", 82_500_000, 4.85, 6.23, 78.4),
        ReserveRates("WETH", "Wrapped Ether", 47_200_000, 1.92, 3.11, 62.1),
        ReserveRates("cbBTC", "Coinbase Wrapped BTC", 28_900_000, 0.41, 1.75, 31.5),
        ReserveRates("USDbC", "USD Base Coin", 12_300_000, 3.94, 5.47, 71.2),
        ReserveRates("wstETH", "Wrapped liquid staked Ether 2.0", 9_800_000, 0.12, 0.85, 18.9),
    ],
    Chain.ARBITRUM: [
        ReserveRates("USDC", "USD Coin", 195_000_000, 5.12, 6.78, 81.3),
        ReserveRates("USDT", "Tether USD", 98_400_000, 4.77, 6.25, 76.8),
        ReserveRates("WETH", "Wrapped Ether", 87_600_000, 1.85, 3.02, 64.4),
        ReserveRates("WBTC", "Wrapped BTC", 54_200_000, 0.38, 1.64, 29.7),
        ReserveRates("ARB", "Arbitrum", 18_700_000, 0.09, 2.31, 12.3),
        ReserveRates("DAI", "Dai Stablecoin", 15_300_000, 4.21, 5.89, 69.5),
    ],
    Chain.OPTIMISM: [
        ReserveRates("USDC", "USD Coin", 89_000_000, 4.63, 6.01, 77.2),
        ReserveRates("WETH", "Wrapped Ether", 52_800_000, 1.74, 2.89, 61.7),
        ReserveRates("WBTC", "Wrapped BTC", 24_600_000, 0.29, 1.52, 26.4),
        ReserveRates("OP", "Optimism", 11_200_000, 0.07, 1.98, 9.8),
        ReserveRates("DAI", "Dai Stablecoin", 8_900_000, 3.87, 5.42, 65.3),
    ],
}

UNISWAP_POOLS: dict[Chain, list[PoolStats]] = {
    Chain.BASE: [
        PoolStats("USDC/WETH", 5, 48_200_000, 32_500_000, 16_250, 18432, "1 USDC = 0.000282 WETH"),
        PoolStats("WETH/cbBTC", 30, 29_800_000, 8_900_000, 26_700, 4821, "1 WETH = 0.027143 cbBTC"),
        PoolStats("USDC/USDbC", 1, 18_700_000, 45_200_000, 4_520, 29847, "1 USDC = 0.999972 USDbC"),
        PoolStats("WETH/DAI", 30, 11_400_000, 5_200_000, 15_600, 3214, "1 WETH = 2847.32 DAI"),
        PoolStats("USDC/CBETH", 5, 8_900_000, 3_400_000, 1_700, 1987, "1 USDC = 0.000323 CBETH"),
        PoolStats("WETH/wstETH", 1, 6_200_000, 2_100_000, 210, 892, "1 WETH = 0.941782 wstETH"),
    ],
    Chain.ARBITRUM: [
        PoolStats("USDC/WETH", 5, 127_400_000, 89_700_000, 44_850, 52847, "1 USDC = 0.000282 WETH"),
        PoolStats("WBTC/WETH", 30, 68_900_000, 28_300_000, 84_900, 12483, "1 WBTC = 35.248 WETH"),
        PoolStats("USDT/USDC", 1, 52_300_000, 98_400_000, 9_840, 71293, "1 USDT = 1.000018 USDC"),
        PoolStats("ARB/WETH", 30, 38_700_000, 22_100_000, 66_300, 24187, "1 ARB = 0.000312 WETH"),
        PoolStats("WETH/DAI", 30, 24_100_000, 12_800_000, 38_400, 8934, "1 WETH = 2849.17 DAI"),
        PoolStats("WBTC/USDC", 30, 19_800_000, 15_400_000, 46_200, 6821, "1 WBTC = 98245.30 USDC"),
    ],
}

UNISWAP_TVL: dict[Chain, float] = {
    Chain.BASE: 183_500_000,
    Chain.ARBITRUM: 524_800_000,
}

UNISWAP_POOL_COUNT: dict[Chain, int] = {
    Chain.BASE: 2847,
    Chain.ARBITRUM: 8934,
}

MORPHO_MARKETS: dict[Chain, list[MarketStats]] = {
    Chain.BASE: [
        MarketStats(
            "0x8793cf302b8ffd655ab97bd1c695dbd967807e8367a65cb2f4edaf1380ba1bda",
            "USDC", "WETH", 86.0, 48_200_000, 5.12, 6.45, 78.3,
        ),
        MarketStats(
            "0x3b3769cfca57be2eaed03fcc3d3a424b89ceb78c17d86ec3e8f31d9c3e83fc9f",
            "USDC", "cbBTC", 86.0, 34_700_000, 4.87, 6.11, 74.6,
        ),
        MarketStats(
            "0x136f6278512b07ad72e1cc6bdc63e2b3dab64d75c19b9695826d3bb7c8e5bc8a",
            "WETH", "wstETH", 94.5, 28_900_000, 2.34, 3.18, 67.2,
        ),
        MarketStats(
            "0x9103c3b4e834476c9a62ea009ba2c884ee42e9b7ddf54e4d6a9f5e3bd0f5e05b",
            "USDC", "wstETH", 86.0, 21_400_000, 4.63, 5.89, 72.1,
        ),
        MarketStats(
            "0xa0534c78620867b7c8706e3b6df9e69a2bc67c783281b7a77e034ed75cee012a",
            "USDC", "cbETH", 86.0, 14_800_000, 4.98, 6.23, 75.8,
        ),
    ],
    Chain.ETHEREUM: [
        MarketStats(
            "0xb323495f7e4148be5643a4ea4a8221eef163e4bccfdedc2a6f4696baacbc86cc",
            "USDC", "wstETH", 86.0, 284_500_000, 6.21, 7.84, 83.4,
        ),
        MarketStats(
            "0xc54d7acf14de29e0e5527cabd7a576506870346a78a11a6762e2cca66322ec41",
            "USDT", "WBTC", 86.0, 198_300_000, 5.87, 7.31, 79.6,
        ),
        MarketStats(
            "0xd0e50cdac92fe2172043f5e0c36532c6369d24947e40968f34a5e8819ca9ec5",
            "DAI", "wstETH", 94.5, 142_700_000, 4.52, 5.63, 69.3,
        ),
        MarketStats(
            "0x7dde86a1e94561d9690ec678db673c1a6396365f7d1d65e129c5fff0990ff758",
            "USDC", "WBTC", 86.0, 98_400_000, 5.41, 6.78, 76.2,
        ),
        MarketStats(
            "0x3a85e619751152991742810df6ec69ce473daef99e28a64ab2340d7b7ccfee49",
            "WETH", "wstETH", 94.5, 74_600_000, 1.98, 2.74, 62.1,
        ),
    ],
}

MORPHO_VAULTS: dict[Chain, list[VaultStats]] = {
    Chain.BASE: [
        VaultStats("0xeE8F4eC5672F09119b96Ab6fB59C27E1b7e44b61", "Gauntlet USDC Prime", "gtUSDCp", "USDC", 327_600_000, 3.91, 3.91),
        VaultStats("0xBEEFE94c8aD530842bfE7d8B397938fFc1cb83b2", "Steakhouse Prime USDC", "steakUSDC", "USDC", 314_100_000, 3.91, 3.91),
        VaultStats("0x6b68A575E5A11E7e0C5e9D5dA5a2D81fFDE45bb3", "Gauntlet WETH Core", "gtWETH", "WETH", 94_300_000, 2.47, 2.47),
        VaultStats("0xA0D3d43a8d88B7d97D9C0A0E5Ab51Bf5E89C72a0", "Moonwell Flagship USDC", "mwUSDC", "USDC", 78_900_000, 5.83, 5.83),
        VaultStats("0x616fD3d682f90d3f4E9d2a0B9Bde09e0D5b1E534", "Moonwell Flagship WETH", "mwWETH", "WETH", 47_200_000, 2.31, 2.31),
    ],
    Chain.ETHEREUM: [
        VaultStats("0xBEEF01735c132Ada46AA9aA4c54623cAA92A64CB", "Steakhouse USDC", "steakUSDC", "USDC", 498_700_000, 6.84, 6.84),
        VaultStats("0x38989BBA00BDF8181F4082995b3DEae96163aC5D", "Gauntlet USDC Core", "gtUSDCcore", "USDC", 412_300_000, 6.41, 6.41),
        VaultStats("0x2C25f6C25770ffeF5b59d4A4c5E95A2cDB7EF83B", "Gauntlet DAI Core", "gtDAIcore", "DAI", 287_900_000, 5.23, 5.23),
        VaultStats("0x4881Ef0BF6d2365D3dd6499ccd7532bcdBCE0658", "Gauntlet WETH Core", "gtWETHcore", "WETH", 198_400_000, 3.14, 3.14),
        VaultStats("0xd63070114470f685b75B74D60EEc7c1113d33a3D", "Gauntlet USDT Core", "gtUSDTcore", "USDT", 164_700_000, 6.57, 6.57),
    ],
}
