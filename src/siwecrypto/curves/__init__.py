"""Elliptic-curve crypto: secp256k1 (Ethereum/Bitcoin)."""

from .secp256k1 import (G, N, P, POINT_AT_INFINITY, Point, is_on_curve,
                        is_point_at_infinity, mod_add, mod_inv, mod_mul,
                        mod_pow, point_add, point_double, point_neg,
                        point_to_bytes, privkey_to_address, privkey_to_point,
                        privkey_to_pubkey, scalar_multiply, sign_recoverable,
                        sqrt_mod)

__all__: tuple[str, ...] = (
    "G",
    "N",
    "P",
    "POINT_AT_INFINITY",
    "Point",
    "is_on_curve",
    "is_point_at_infinity",
    "mod_add",
    "mod_inv",
    "mod_mul",
    "mod_pow",
    "point_add",
    "point_double",
    "point_neg",
    "point_to_bytes",
    "privkey_to_address",
    "privkey_to_point",
    "privkey_to_pubkey",
    "scalar_multiply",
    "sign_recoverable",
    "sqrt_mod",
)
