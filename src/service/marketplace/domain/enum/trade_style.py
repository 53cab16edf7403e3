from enum import StrEnum


class TradeStyle(StrEnum):
    SHORT = 'SHORT'
    MID_SHORT = 'MID_SHORT'
    MID = 'MID'
    MID_LONG = 'MID_LONG'
    LONG = 'LONG'

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    TradeStyle.SHORT: 'Short-term',
    TradeStyle.MID_SHORT: 'Short-to-mid-term',
    TradeStyle.MID: 'Mid-term',
    TradeStyle.MID_LONG: 'Mid-to-long-term',
    TradeStyle.LONG: 'Long-term',
}
