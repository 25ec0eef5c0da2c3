from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional
from swapvol.core.dto import IndexerStatus, Token, TradesPage

class IndexerPort(ABC):
    """
    Abstract Class for fetching token and swap records from an indexer.
    """

    # --- Token list ---

    @abstractmethod
    def get_tokens(self) -> List[Token]:
        raise NotImplementedError

    # --- Indexer head ---

    @abstractmethod
    def get_status(self) -> IndexerStatus:
        raise NotImplementedError

    # --- Swaps in a block window ---

    @abstractmethod
    def get_trades(
        self,
        block_start: int,
        block_stop: int,
        contract_address: Optional[str] = None,
    ) -> TradesPage:
        raise NotImplementedError
