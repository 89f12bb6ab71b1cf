"""
Transaction builder for native ETH transfers.
"""

from ...types import TransactionRequest


NATIVE_TRANSFER_GAS = 21000


def fee_caps(gas_price_wei: int, max_fee_multiplier: int = 2) -> tuple[int, int]:
    """Return ``(max_fee_per_gas, max_priority_fee_per_gas)`` for a gas price.

    Fixed policy: the fee cap is a multiple of the current gas price and the
    priority fee is the gas price itself. No fee history is sampled.
    """
    return gas_price_wei * max_fee_multiplier, gas_price_wei


def build_native_transfer(
    chain_id: int,
    from_address: str,
    to_address: str,
    amount_wei: int,
    gas_price_wei: int,
    gas_limit: int = NATIVE_TRANSFER_GAS,
    max_fee_multiplier: int = 2,
) -> TransactionRequest:
    max_fee_per_gas, max_priority_fee_per_gas = fee_caps(gas_price_wei, max_fee_multiplier)
    return TransactionRequest(
        chain_id=chain_id,
        from_address=from_address,
        to_address=to_address,
        value=amount_wei,
        gas=gas_limit,
        max_fee_per_gas=max_fee_per_gas,
        max_priority_fee_per_gas=max_priority_fee_per_gas,
    )
