from enum import StrEnum


class PostCategory(StrEnum):
    ALL = 'ALL'
    QUESTION = 'QUESTION'
    TRADE_RECORD = 'TRADE_RECORD'
    STOCK_DISCUSSION = 'STOCK_DISCUSSION'
    MARKET_ANALYSIS = 'MARKET_ANALYSIS'

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def writable(cls) -> list['PostCategory']:
        """Categories a post can be filed under (ALL is a list filter only)"""
        return [category for category in cls if category is not cls.ALL]


_DISPLAY_NAMES = {
    PostCategory.ALL: 'All',
    PostCategory.QUESTION: 'Q&A',
    PostCategory.TRADE_RECORD: 'Trade Records',
    PostCategory.STOCK_DISCUSSION: 'Stock Discussion',
    PostCategory.MARKET_ANALYSIS: 'Market Analysis',
}
