CRYPTO_KEYWORDS = frozenset(
    {
        "bitcoin",
        "btc",
        "ethereum",
        "eth",
        "crypto",
        "token",
        "solana",
        "sol",
        "xrp",
        "ripple",
        "cardano",
        "ada",
        "dogecoin",
        "doge",
        "polygon",
        "matic",
        "avalanche",
        "avax",
        "chainlink",
        "link",
        "uniswap",
        "uni",
        "aave",
        "compound",
        "defi",
        "nft",
        "blockchain",
        "altcoin",
        "stablecoin",
        "usdc",
        "usdt",
        "tether",
        "binance",
        "bnb",
        "coinbase",
        "kraken",
        "ftx",
        "polkadot",
        "dot",
        "cosmos",
        "atom",
        "near",
        "arbitrum",
        "arb",
        "optimism",
        "op",
        "base",
        "sui",
        "aptos",
        "apt",
        "sei",
        "celestia",
        "tia",
        "jupiter",
        "jup",
        "raydium",
        "orca",
        "marinade",
        "lido",
        "eigenlayer",
        "restaking",
        "memecoin",
        "meme coin",
        "pepe",
        "shiba",
        "floki",
        "bonk",
        "wif",
    }
)
