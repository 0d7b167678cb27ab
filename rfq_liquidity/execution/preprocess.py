"""
Firm quote acquisition and slippage guard.

For the maker the aggregator picked, preprocessing:

1. refuses blacklisted trade origins,
2. requests a firm quote within the call timeout,
3. checks the response is a complete, signed RFQ-T quote for the requested pair,
4. checks the quoted amounts against the priced amounts and slippage factor,
5. attaches the quote to the trade.

Any failure in steps 2 to 4 restricts the maker, unless the maker reported
that the user is restricted, in which case the user is blacklisted instead.
The original error is always re-raised.
"""

import json
import logging
from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Dict, Tuple

import pydantic

from ..fetchers.base import RfqApi
from ..makers.restrictions import MarketMakerFilter
from ..pricing.levels import DECIMAL_PRECISION
from ..pricing.models import SwapSide, Token, normalize_token
from ..utils.async_helpers import with_timeout
from .errors import RfqError, SlippageCheckError, UserBlacklistedError
from .models import (
    MAX_UINT256,
    ExchangeTxInfo,
    OptimalSwapExchange,
    PreprocessOptions,
    RfqResponse,
    RfqType,
)

logger = logging.getLogger(__name__)


def _scaled(amount: int, factor: Decimal) -> int:
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return int((Decimal(amount) * factor).to_integral_value(rounding=ROUND_HALF_UP))


def check_slippage(
    side: SwapSide,
    src_amount: int,
    dest_amount: int,
    base_token_amount: int,
    quote_token_amount: int,
    slippage_factor: Decimal,
    log_prefix: str = "",
) -> None:
    """
    Compare firm quote amounts with the amounts the trade was priced at.

    SELL: the quoted output must be at least `dest_amount * slippage_factor`.
    BUY: the quoted output must cover `dest_amount` and the quoted input must
    not exceed `src_amount * slippage_factor`.

    Raises:
        SlippageCheckError: If the quote is worse than allowed
    """
    if side == SwapSide.SELL:
        if quote_token_amount < _scaled(dest_amount, slippage_factor):
            raise SlippageCheckError(
                f"{log_prefix}: too much slippage on quote {side.value} "
                f"quoteTokenAmount {quote_token_amount} / destAmount {dest_amount} < {slippage_factor}"
            )
        return

    if quote_token_amount < dest_amount:
        raise SlippageCheckError(
            f"{log_prefix}: too much slippage on quote {side.value} "
            f"quoteTokenAmount {quote_token_amount} < destAmount {dest_amount}"
        )
    if base_token_amount > _scaled(src_amount, slippage_factor):
        raise SlippageCheckError(
            f"{log_prefix}: too much slippage on quote {side.value} "
            f"baseTokenAmount {base_token_amount} / srcAmount {src_amount} > {slippage_factor}"
        )


class TransactionPreprocessor:
    """Turns a priced maker into a trade backed by a signed firm quote."""

    def __init__(
        self,
        exchange_name: str,
        network: int,
        api: RfqApi,
        maker_filter: MarketMakerFilter,
        executor_address: str,
        call_timeout: float = 0.15,
    ):
        """
        Args:
            exchange_name: Exchange key for log prefixes and the user-restricted signal
            network: Network id, sent as the chain id
            api: Firm quote endpoint
            maker_filter: Restriction and blacklist cache
            executor_address: Contract that will execute the trade (the quote's wallet)
            call_timeout: Timeout for the firm quote request in seconds
        """
        self.exchange_name = exchange_name
        self.network = network
        self.api = api
        self.maker_filter = maker_filter
        self.executor_address = executor_address.lower()
        self.call_timeout = call_timeout
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def log_prefix(self) -> str:
        return f"{self.exchange_name}-{self.network}"

    @property
    def user_restricted_signal(self) -> str:
        return f"User is restricted from using {self.exchange_name}"

    def is_user_restricted_error(self, error: BaseException) -> bool:
        return str(error).endswith(self.user_restricted_signal)

    async def preprocess(
        self,
        optimal_swap_exchange: OptimalSwapExchange,
        src_token: Token,
        dest_token: Token,
        side: SwapSide,
        options: PreprocessOptions,
    ) -> Tuple[OptimalSwapExchange, ExchangeTxInfo]:
        """
        Request and verify a firm quote for the chosen maker.

        Returns:
            The trade with the firm quote in `data`, and the execution deadline

        Raises:
            UserBlacklistedError: The trade origin is blacklisted
            RfqError: The quote request failed or returned an unusable quote
            SlippageCheckError: The quote is worse than the slippage allows
            AsyncCallTimeoutError: The quote request timed out
        """
        tx_origin = options.tx_origin.lower()
        if await self.maker_filter.is_blacklisted(tx_origin):
            self.logger.warning(
                f"{self.log_prefix}: blacklisted TX Origin address '{options.tx_origin}' "
                f"trying to build a transaction. Bailing..."
            )
            raise UserBlacklistedError(
                f"{self.log_prefix}: user={tx_origin} is blacklisted", tx_origin
            )

        mm = (optimal_swap_exchange.data or {}).get("mm")
        if mm is None:
            raise ValueError(f"{self.log_prefix}: MM was not provided in data")

        normalized_src = normalize_token(src_token)
        normalized_dest = normalize_token(dest_token)
        pair_name = f"{normalized_src.address}_{normalized_dest.address}"

        try:
            raw = await with_timeout(
                self.api.request_quote(
                    self._quote_params(
                        optimal_swap_exchange, normalized_src, normalized_dest, side, tx_origin, mm
                    )
                ),
                self.call_timeout,
                f"{self.exchange_name}: requestQuote timeout",
            )
            rfq = self._validate_response(raw, pair_name, normalized_src, normalized_dest)

            quote = rfq.quote_data
            check_slippage(
                side,
                src_amount=int(optimal_swap_exchange.src_amount),
                dest_amount=int(optimal_swap_exchange.dest_amount),
                base_token_amount=int(quote.base_token_amount),
                quote_token_amount=int(quote.quote_token_amount),
                slippage_factor=Decimal(str(options.slippage_factor)),
                log_prefix=self.log_prefix,
            )
        except SlippageCheckError as e:
            self.logger.warning(str(e))
            await self._on_failure(e, mm, tx_origin)
            raise
        except Exception as e:
            await self._on_failure(e, mm, tx_origin)
            raise

        deadline = quote.quote_expiry if quote.quote_expiry > 0 else MAX_UINT256

        enriched = replace(
            optimal_swap_exchange,
            data={
                "mm": mm,
                "quote_data": quote,
                "signature": rfq.signature,
                "gas_estimate": rfq.gas_estimate,
            },
        )
        return enriched, ExchangeTxInfo(deadline=deadline)

    def _quote_params(
        self,
        optimal_swap_exchange: OptimalSwapExchange,
        src_token: Token,
        dest_token: Token,
        side: SwapSide,
        tx_origin: str,
        mm: str,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "chainId": self.network,
            "baseToken": src_token.address,
            "quoteToken": dest_token.address,
            "wallet": self.executor_address,
            "effectiveTrader": tx_origin,
            "marketMakers": [mm],
        }
        if side == SwapSide.SELL:
            params["baseTokenAmount"] = str(optimal_swap_exchange.src_amount)
        else:
            params["quoteTokenAmount"] = str(optimal_swap_exchange.dest_amount)
        return params

    def _validate_response(
        self,
        raw: Dict[str, Any],
        pair_name: str,
        src_token: Token,
        dest_token: Token,
    ) -> RfqResponse:
        failure = f"{self.log_prefix}: Failed to fetch RFQ for {pair_name}"

        try:
            rfq = RfqResponse.model_validate(raw)
        except pydantic.ValidationError as e:
            message = f"{failure}. Malformed response: {e}"
            self.logger.warning(message)
            raise RfqError(message) from e

        if rfq.status != "success":
            message = f"{failure}: {json.dumps(raw, default=str)}"
        elif rfq.quote_data is None:
            message = f"{failure}. Missing quote data"
        elif not rfq.signature:
            message = f"{failure}. Missing signature"
        elif not rfq.gas_estimate:
            message = f"{failure}. No gas estimate."
        elif rfq.quote_data.rfq_type != RfqType.RFQT:
            message = f"{failure}. Invalid RFQ type."
        elif rfq.quote_data.base_token != src_token.address:
            message = (
                f"QuoteData baseToken={rfq.quote_data.base_token} "
                f"is different from srcToken={src_token.address}"
            )
        elif rfq.quote_data.quote_token != dest_token.address:
            message = (
                f"QuoteData quoteToken={rfq.quote_data.quote_token} "
                f"is different from destToken={dest_token.address}"
            )
        else:
            return rfq

        self.logger.warning(message)
        raise RfqError(message)

    async def _on_failure(self, error: Exception, mm: str, tx_origin: str) -> None:
        if self.is_user_restricted_error(error):
            self.logger.warning(
                f"{self.log_prefix}: Encountered restricted user={tx_origin}. "
                f"Adding to local blacklist cache"
            )
            await self.maker_filter.blacklist(tx_origin)
        else:
            await self.maker_filter.restrict(mm)
