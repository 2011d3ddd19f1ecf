"""Traced AES-128, a biclique key-recovery attack and toy-cipher cryptanalysis."""

__version__ = "0.1.0"

__all__ = [
    "aes",
    "biclique",
    "biclique_demo",
    "sbox",
    "toycipher",
    "toycipher_cli",
    "verify",
]