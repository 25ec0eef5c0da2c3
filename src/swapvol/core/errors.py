class SwapVolError(Exception):
    pass


class ParseError(SwapVolError):
    pass


class AmountRangeError(SwapVolError):
    pass


class DataSourceError(SwapVolError):
    pass


class RateLimitError(DataSourceError):
    pass
