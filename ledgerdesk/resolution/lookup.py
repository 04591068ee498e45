"""
Lookup Maps

Read-only projection of the ledger's accounts, tags and instruments into
id -> display name tables, plus the account -> instrument index used to
auto-resolve currencies.

DESIGN DECISION: Maps are rebuilt before EVERY operation from fresh
ledger snapshots and never cached, because the ledger may have synced
in between.
"""

from typing import Optional, Sequence

from pydantic import BaseModel, Field

from ledgerdesk.models.ledger import Account, Instrument, Tag


class LookupMaps(BaseModel):
    """Lookup tables for resolving entity IDs to display names."""

    accounts: dict[str, str] = Field(
        default_factory=dict,
        description="Account ID -> title"
    )
    tags: dict[str, str] = Field(
        default_factory=dict,
        description="Tag ID -> title"
    )
    instruments: dict[int, str] = Field(
        default_factory=dict,
        description="Instrument ID -> currency symbol"
    )
    account_instruments: dict[str, int] = Field(
        default_factory=dict,
        description="Account ID -> instrument ID"
    )

    # Unknown IDs fall back to the ID itself so output stays readable.

    def account_name(self, account_id: str) -> str:
        return self.accounts.get(account_id, account_id)

    def tag_name(self, tag_id: str) -> str:
        return self.tags.get(tag_id, tag_id)

    def instrument_symbol(self, instrument_id: int) -> str:
        return self.instruments.get(instrument_id, str(instrument_id))

    def account_instrument(self, account_id: str) -> Optional[int]:
        """Instrument of the account, or None if the account is unknown or has none."""
        return self.account_instruments.get(account_id)


def build_lookup_maps(
    accounts: Sequence[Account],
    tags: Sequence[Tag],
    instruments: Sequence[Instrument],
) -> LookupMaps:
    """Build lookup maps from full ledger snapshots."""
    maps = LookupMaps()

    for account in accounts:
        maps.accounts[account.id] = account.title
        if account.instrument is not None:
            maps.account_instruments[account.id] = account.instrument

    for tag in tags:
        maps.tags[tag.id] = tag.title

    for instrument in instruments:
        maps.instruments[instrument.id] = instrument.symbol

    return maps
