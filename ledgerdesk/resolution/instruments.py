"""Instrument (currency) resolution for accounts."""

from typing import Optional

from ledgerdesk.errors import UnresolvedInstrumentError
from ledgerdesk.resolution.lookup import LookupMaps


def resolve_instrument(
    maps: LookupMaps,
    account_id: str,
    explicit_instrument: Optional[int] = None,
    field: str = "instrument_id",
) -> int:
    """
    Resolve the instrument to use for an account.

    An explicit instrument ALWAYS wins, even when the account's own
    currency differs. This is how a caller forces a currency.
    Otherwise the account's instrument from the lookup maps is used.

    Args:
        maps: Current lookup maps
        account_id: Account to resolve for
        explicit_instrument: Caller-supplied override
        field: Name of the override field, used in the error message

    Raises:
        UnresolvedInstrumentError: No override and the account has no instrument
    """
    if explicit_instrument is not None:
        return explicit_instrument

    instrument = maps.account_instrument(account_id)
    if instrument is None:
        raise UnresolvedInstrumentError(account_id, field=field)
    return instrument
