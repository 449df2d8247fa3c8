"""Domain events raised when a delivery posts to the ledger."""

from protean.fields import DateTime, Identifier, String

from logistics.domain import logistics


@logistics.event(part_of="MerchantProfile")
class MerchantBalanceCredited:
    """A delivered order moved the merchant balance by ``cod - price``.

    ``delta`` may be negative when the delivery fee exceeds the COD collected.
    """

    __version__ = 1

    merchant_id: Identifier(required=True)
    order_id: Identifier(required=True)
    delta: String(required=True)  # serialized decimal
    new_balance: String(required=True)  # serialized decimal
    posted_at: DateTime(required=True)


@logistics.event(part_of="CourierProfile")
class CourierWalletCredited:
    """The courier now holds the COD cash collected for a delivered order."""

    __version__ = 1

    courier_id: Identifier(required=True)
    order_id: Identifier(required=True)
    delta: String(required=True)  # serialized decimal
    new_wallet: String(required=True)  # serialized decimal
    posted_at: DateTime(required=True)
