"""ganji-gateway — HTTP gateway for Litecoin asset notarization and Solana licenses."""

__version__ = "1.0.0"
