"""Pydantic models for swap intents, pool state and derived swap parameters."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Annotated, Any, Final, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from web3 import Web3

from pairswap.exceptions import InvalidIntent

DEFAULT_SLIPPAGE_BPS: Final[int] = 100
DEFAULT_MAX_DELAY_SECONDS: Final[int] = 60 * 2

AMOUNT_REGEX: Final[re.Pattern[str]] = re.compile(r"^([0-9]+\.?[0-9]*|\.[0-9]+)$")


def checksum_address(value: Any) -> str:
    """Return the EIP-55 form of ``value`` or raise ``ValueError``."""
    candidate = value.strip() if isinstance(value, str) else value
    if not isinstance(candidate, str) or not Web3.is_address(candidate):
        raise ValueError(f"Invalid address: {value!r}")
    return Web3.to_checksum_address(candidate)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    location = ".".join(str(part) for part in errors[0].get("loc", ()))
    message = errors[0].get("msg", "")
    return f"{location}: {message}" if location else message


class TokenRef(BaseModel):
    """ERC20 token identity. ``decimals`` is queried on-chain when omitted."""

    model_config = ConfigDict(frozen=True)

    address: str
    decimals: int | None = Field(default=None, ge=0, le=255)

    @field_validator("address")
    @classmethod
    def validate_address(cls, value: str) -> str:
        return checksum_address(value)

    @classmethod
    def parse(cls, token: TokenRef | str, decimals: int | None = None) -> TokenRef:
        if isinstance(token, TokenRef):
            return token if decimals is None else token.resolved(decimals)
        try:
            return cls(address=token, decimals=decimals)
        except ValidationError as exc:
            raise InvalidIntent(f"Invalid token {token!r}: {_first_error(exc)}") from exc

    def resolved(self, decimals: int) -> TokenRef:
        return self.model_copy(update={"decimals": int(decimals)})


class _TradeAmountBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: str

    @field_validator("amount", mode="before")
    @classmethod
    def normalize_amount(cls, value: Any) -> Any:
        # Floats cannot carry an exact decimal amount.
        if isinstance(value, float) or isinstance(value, bool):
            raise ValueError("amount must be a decimal string, int or Decimal")
        if isinstance(value, Decimal):
            return format(value, "f")
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: str) -> str:
        if not AMOUNT_REGEX.match(value):
            raise ValueError(f"Invalid amount: {value!r}")
        if not any(ch in "123456789" for ch in value):
            raise ValueError("amount must be greater than zero")
        return value


class ExactInput(_TradeAmountBase):
    """Sell exactly ``amount`` of the input token."""

    kind: Literal["exact_input"] = "exact_input"


class ExactOutput(_TradeAmountBase):
    """Buy exactly ``amount`` of the output token."""

    kind: Literal["exact_output"] = "exact_output"


TradeAmount = Annotated[Union[ExactInput, ExactOutput], Field(discriminator="kind")]


class SwapIntent(BaseModel):
    """Caller request for a direct single-pair swap."""

    model_config = ConfigDict(frozen=True)

    input_token: TokenRef
    output_token: TokenRef
    trade: TradeAmount
    max_slippage_bps: int = Field(default=DEFAULT_SLIPPAGE_BPS, ge=0, le=10_000)
    max_delay_seconds: int = Field(default=DEFAULT_MAX_DELAY_SECONDS, gt=0)

    @model_validator(mode="after")
    def validate_distinct_tokens(self) -> SwapIntent:
        if self.input_token.address == self.output_token.address:
            raise ValueError("input_token and output_token must differ")
        return self

    @property
    def exact_input(self) -> bool:
        return self.trade.kind == "exact_input"

    @property
    def path(self) -> tuple[str, str]:
        return (self.input_token.address, self.output_token.address)

    @classmethod
    def build(
        cls,
        input_token: TokenRef | str,
        output_token: TokenRef | str,
        amount: str | int | Decimal | None = None,
        exact_input: bool | None = None,
        *,
        input_amount: str | int | Decimal | None = None,
        output_amount: str | int | Decimal | None = None,
        input_decimals: int | None = None,
        output_decimals: int | None = None,
        max_slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
        max_delay_seconds: int = DEFAULT_MAX_DELAY_SECONDS,
    ) -> SwapIntent:
        """Build an intent from either ``amount``/``exact_input`` or ``input_amount``/``output_amount``.

        Exactly one exact amount must be supplied; anything else raises ``InvalidIntent``
        before any chain access happens.
        """
        if amount is not None:
            if input_amount is not None or output_amount is not None:
                raise InvalidIntent("must specify either amount or input_amount/output_amount, not both")
            if exact_input is None:
                raise InvalidIntent("exact_input must be set when amount is given")
            if exact_input:
                input_amount = amount
            else:
                output_amount = amount

        if input_amount is not None and output_amount is not None:
            raise InvalidIntent("must only specify input_amount or output_amount")
        if input_amount is None and output_amount is None:
            raise InvalidIntent("must specify input_amount or output_amount")

        input_ref = TokenRef.parse(input_token, input_decimals)
        output_ref = TokenRef.parse(output_token, output_decimals)
        trade: dict[str, Any] = (
            {"kind": "exact_input", "amount": input_amount}
            if input_amount is not None
            else {"kind": "exact_output", "amount": output_amount}
        )
        try:
            return cls(
                input_token=input_ref,
                output_token=output_ref,
                trade=trade,
                max_slippage_bps=max_slippage_bps,
                max_delay_seconds=max_delay_seconds,
            )
        except ValidationError as exc:
            raise InvalidIntent(f"Invalid swap intent: {_first_error(exc)}") from exc


class PoolState(BaseModel):
    """Reserves of one pair as read from a single ``getReserves`` call."""

    model_config = ConfigDict(frozen=True)

    pair_address: str
    token0: str
    token1: str
    reserve0: int = Field(ge=0)
    reserve1: int = Field(ge=0)

    @field_validator("pair_address", "token0", "token1")
    @classmethod
    def validate_address(cls, value: str) -> str:
        return checksum_address(value)

    @property
    def is_empty(self) -> bool:
        return self.reserve0 == 0 or self.reserve1 == 0

    def reserves_for(self, token_in: str) -> tuple[int, int]:
        """Return ``(reserve_in, reserve_out)`` for a trade selling ``token_in``."""
        token_in = checksum_address(token_in)
        if token_in == self.token0:
            return self.reserve0, self.reserve1
        if token_in == self.token1:
            return self.reserve1, self.reserve0
        raise ValueError(f"Token {token_in} is not part of pair {self.pair_address}")


class SwapParams(BaseModel):
    """Router arguments derived for one swap. Amounts are in smallest token units."""

    model_config = ConfigDict(frozen=True)

    amount_in: int = Field(ge=0)
    amount_out: int = Field(ge=0)
    expected_amount: int | None = None
    expected_slippage: str | None = None
    path: tuple[str, str]
    deadline: int
    exact_input: bool

    @property
    def required_input(self) -> int:
        # Exact amount for exact input, slippage-bounded maximum for exact output.
        return self.amount_in
