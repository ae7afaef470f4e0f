"""
Reconciliation of the server snapshot with the locally cached snapshot

The server is authoritative for every field except one: a payment method
recorded locally as CASH survives when the server holds another value for the
same id. Older server schemas dropped the field and defaulted it to CARD.
The rule is one-directional; a local CARD never overrides a server CASH.
"""

import dataclasses
import logging
from typing import Iterable, List

from database.models import Transaction
from shared.enums import PaymentMethod

logger = logging.getLogger(__name__)


def merge_transactions(remote: Iterable[Transaction], local: Iterable[Transaction]) -> List[Transaction]:
    """
    Merge remote and local copies of a user's transactions

    Args:
        remote: Sanitized server snapshot
        local: Sanitized cached snapshot of the same user

    Returns:
        The server records (in server order) with the local CASH override applied.
        Records that only exist locally are not part of the result.
    """
    local_by_id = {t.id: t for t in local}
    merged = []

    for server_record in remote:
        cached = local_by_id.get(server_record.id)

        if (
            cached is not None
            and cached.payment_method == PaymentMethod.CASH
            and server_record.payment_method != PaymentMethod.CASH
        ):
            logger.debug(f"Keeping local CASH payment method for transaction {server_record.id}")
            server_record = dataclasses.replace(server_record, payment_method=PaymentMethod.CASH)

        merged.append(server_record)

    return merged
