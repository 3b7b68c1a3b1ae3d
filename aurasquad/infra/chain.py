"""
ChainClient — AURA token, rewards, conversion and marketplace contracts.

Wraps web3's AsyncWeb3. Every operation is best-effort: failures are
logged and degrade to None / 0 / False instead of raising, so a chain
outage never breaks squad operations. Argument validation still raises.

Amounts cross the API as decimal AURA and go on-chain as 18-decimal
fixed-point integers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from eth_account import Account
from web3 import AsyncWeb3, Web3
from web3.logs import DISCARD

from aurasquad.core.errors import ChainError, ValidationError

logger = logging.getLogger(__name__)

TOKEN_DECIMALS = 18
DEFAULT_CONVERSION_RATE = 10  # 10 AURA = 1 USDC


def _fn(name: str, inputs: list[tuple[str, str]], outputs: list[str], mutability: str) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "stateMutability": mutability,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": "", "type": t} for t in outputs],
    }


def _event(name: str, inputs: list[tuple[str, str, bool]]) -> dict[str, Any]:
    return {
        "type": "event",
        "name": name,
        "anonymous": False,
        "inputs": [{"name": n, "type": t, "indexed": i} for n, t, i in inputs],
    }


# Minimal ABIs: only the functions and events we use.
AURA_TOKEN_ABI = [
    _fn("balanceOf", [("owner", "address")], ["uint256"], "view"),
    _fn("approve", [("spender", "address"), ("amount", "uint256")], ["bool"], "nonpayable"),
    _fn("transfer", [("to", "address"), ("amount", "uint256")], ["bool"], "nonpayable"),
]

REWARDS_MINTER_ABI = [
    _fn("mintReward", [("to", "address"), ("amount", "uint256")], ["bool"], "nonpayable"),
    _fn("getRewardRate", [("activityType", "string")], ["uint256"], "view"),
]

TOKEN_CONVERTER_ABI = [
    _fn("convertAuraToUsdc", [("auraAmount", "uint256")], ["bool"], "nonpayable"),
    _fn("convertUsdcToAura", [("usdcAmount", "uint256")], ["bool"], "nonpayable"),
    _fn("getConversionRate", [], ["uint256"], "view"),
    _fn("getDailyLimitRemaining", [("user", "address")], ["uint256"], "view"),
]

AGENT_MARKETPLACE_ABI = [
    _fn(
        "listInsight",
        [("title", "string"), ("description", "string"), ("price", "uint256"), ("category", "string")],
        ["uint256"],
        "nonpayable",
    ),
    _fn("buyInsight", [("insightId", "uint256")], ["bool"], "payable"),
    _fn("rateInsight", [("insightId", "uint256"), ("rating", "uint8")], ["bool"], "nonpayable"),
    _fn("getCreatorReputation", [("creator", "address")], ["uint256"], "view"),
    _fn("isTopCreator", [("creator", "address")], ["bool"], "view"),
    _event("InsightListed", [
        ("insightId", "uint256", True),
        ("creator", "address", True),
        ("price", "uint256", False),
    ]),
]


@dataclass
class ChainSettings:
    rpc_url: str
    chain_id: int
    chain_name: str
    aura_token_address: str
    rewards_minter_address: str
    token_converter_address: str
    agent_marketplace_address: str

    @classmethod
    def from_config(cls, config: Any) -> ChainSettings:
        return cls(
            rpc_url=config.chain_rpc_url,
            chain_id=config.chain_id,
            chain_name=config.chain_name,
            aura_token_address=config.aura_token_address,
            rewards_minter_address=config.rewards_minter_address,
            token_converter_address=config.token_converter_address,
            agent_marketplace_address=config.agent_marketplace_address,
        )


@dataclass
class ListingResult:
    insight_id: int
    tx_hash: str


def to_base_units(amount: float | int | str | Decimal) -> int:
    """Decimal AURA -> 18-decimal integer."""
    return int(Web3.to_wei(Decimal(str(amount)), "ether"))


def from_base_units(value: int) -> Decimal:
    """18-decimal integer -> decimal AURA."""
    return Decimal(Web3.from_wei(value, "ether"))


class ChainClient:
    """
    Async wrapper over the four Aura contracts.

    Contracts are bound lazily on first use. Write operations need a
    signer private key; without one they log and return None.
    """

    def __init__(
        self,
        settings: ChainSettings,
        signer_private_key: Optional[str] = None,
        web3: Optional[AsyncWeb3] = None,
    ):
        self._settings = settings
        self._w3 = web3
        self._account = Account.from_key(signer_private_key) if signer_private_key else None
        self._contracts: dict[str, Any] = {}

    @property
    def has_signer(self) -> bool:
        return self._account is not None

    def _web3(self) -> AsyncWeb3:
        if self._w3 is None:
            self._w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(self._settings.rpc_url))
            logger.info(
                "Chain provider initialized on %s (chain_id=%d)",
                self._settings.chain_name, self._settings.chain_id,
            )
        return self._w3

    def _contract(self, name: str) -> Any:
        if name not in self._contracts:
            address, abi = {
                "aura_token": (self._settings.aura_token_address, AURA_TOKEN_ABI),
                "rewards_minter": (self._settings.rewards_minter_address, REWARDS_MINTER_ABI),
                "token_converter": (self._settings.token_converter_address, TOKEN_CONVERTER_ABI),
                "agent_marketplace": (self._settings.agent_marketplace_address, AGENT_MARKETPLACE_ABI),
            }[name]
            self._contracts[name] = self._web3().eth.contract(
                address=Web3.to_checksum_address(address), abi=abi,
            )
        return self._contracts[name]

    async def _send(self, call: Any) -> Any:
        """Build, sign and send a contract call; return the receipt once mined."""
        if self._account is None:
            raise ChainError("No signer available")
        w3 = self._web3()
        nonce = await w3.eth.get_transaction_count(self._account.address)
        tx = await call.build_transaction({
            "from": self._account.address,
            "nonce": nonce,
            "chainId": self._settings.chain_id,
        })
        signed = self._account.sign_transaction(tx)
        tx_hash = await w3.eth.send_raw_transaction(signed.raw_transaction)
        receipt = await w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt["status"] != 1:
            raise ChainError(f"Transaction reverted: {Web3.to_hex(receipt['transactionHash'])}")
        return receipt

    async def _transact(self, call: Any) -> str:
        receipt = await self._send(call)
        return Web3.to_hex(receipt["transactionHash"])

    # ---- Token ----

    async def get_aura_balance(self, address: str) -> Decimal:
        try:
            raw = await self._contract("aura_token").functions.balanceOf(
                Web3.to_checksum_address(address)
            ).call()
            return from_base_units(raw)
        except Exception as e:
            logger.error("Error getting AURA balance for %s: %s", address, e)
            return Decimal(0)

    async def mint_reward(self, user_address: str, aura_amount: float | Decimal) -> Optional[str]:
        if not self.has_signer:
            logger.error("No signer available for minting rewards")
            return None
        try:
            call = self._contract("rewards_minter").functions.mintReward(
                Web3.to_checksum_address(user_address), to_base_units(aura_amount),
            )
            tx_hash = await self._transact(call)
            logger.info("Reward minted: %s AURA to %s (tx=%s)", aura_amount, user_address, tx_hash)
            return tx_hash
        except Exception as e:
            logger.error("Error minting reward: %s", e)
            return None

    async def batch_mint_rewards(
        self, rewards: list[tuple[str, float | Decimal]],
    ) -> list[tuple[str, Optional[str]]]:
        """Mint sequentially; one failed mint does not stop the rest."""
        results = []
        for address, amount in rewards:
            results.append((address, await self.mint_reward(address, amount)))
        return results

    # ---- Conversion ----

    async def get_conversion_rate(self) -> int:
        """AURA per USDC."""
        try:
            return int(await self._contract("token_converter").functions.getConversionRate().call())
        except Exception as e:
            logger.error("Error getting conversion rate: %s", e)
            return DEFAULT_CONVERSION_RATE

    async def get_daily_limit_remaining(self, user_address: str) -> Decimal:
        try:
            raw = await self._contract("token_converter").functions.getDailyLimitRemaining(
                Web3.to_checksum_address(user_address)
            ).call()
            return from_base_units(raw)
        except Exception as e:
            logger.error("Error getting daily limit: %s", e)
            return Decimal(0)

    async def convert_aura_to_usdc(self, aura_amount: float | Decimal) -> Optional[str]:
        """Approve the converter for ``aura_amount`` then convert."""
        if not self.has_signer:
            logger.error("No signer available for conversion")
            return None
        try:
            amount = to_base_units(aura_amount)
            approve = self._contract("aura_token").functions.approve(
                Web3.to_checksum_address(self._settings.token_converter_address), amount,
            )
            await self._transact(approve)
            tx_hash = await self._transact(
                self._contract("token_converter").functions.convertAuraToUsdc(amount)
            )
            logger.info("Converted %s AURA to USDC (tx=%s)", aura_amount, tx_hash)
            return tx_hash
        except Exception as e:
            logger.error("Error converting AURA to USDC: %s", e)
            return None

    async def convert_usdc_to_aura(self, usdc_amount: float | Decimal) -> Optional[str]:
        if not self.has_signer:
            logger.error("No signer available for conversion")
            return None
        try:
            tx_hash = await self._transact(
                self._contract("token_converter").functions.convertUsdcToAura(
                    to_base_units(usdc_amount)
                )
            )
            logger.info("Converted %s USDC to AURA (tx=%s)", usdc_amount, tx_hash)
            return tx_hash
        except Exception as e:
            logger.error("Error converting USDC to AURA: %s", e)
            return None

    # ---- Marketplace ----

    async def list_insight(
        self, title: str, description: str, price_in_aura: float | Decimal, category: str,
    ) -> Optional[ListingResult]:
        if not self.has_signer:
            logger.error("No signer available for listing insight")
            return None
        try:
            marketplace = self._contract("agent_marketplace")
            receipt = await self._send(marketplace.functions.listInsight(
                title, description, to_base_units(price_in_aura), category,
            ))
            tx_hash = Web3.to_hex(receipt["transactionHash"])
            events = marketplace.events.InsightListed().process_receipt(receipt, errors=DISCARD)
            if not events:
                raise ChainError(f"No InsightListed event in {tx_hash}")
            insight_id = int(events[0]["args"]["insightId"])
            logger.info("Insight %d listed: %r at %s AURA (tx=%s)",
                        insight_id, title, price_in_aura, tx_hash)
            return ListingResult(insight_id=insight_id, tx_hash=tx_hash)
        except Exception as e:
            logger.error("Error listing insight: %s", e)
            return None

    async def buy_insight(self, insight_id: int) -> Optional[str]:
        if not self.has_signer:
            logger.error("No signer available for buying insight")
            return None
        try:
            tx_hash = await self._transact(
                self._contract("agent_marketplace").functions.buyInsight(insight_id)
            )
            logger.info("Insight %d purchased (tx=%s)", insight_id, tx_hash)
            return tx_hash
        except Exception as e:
            logger.error("Error buying insight: %s", e)
            return None

    async def rate_insight(self, insight_id: int, rating: int) -> Optional[str]:
        if not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")
        if not self.has_signer:
            logger.error("No signer available for rating insight")
            return None
        try:
            tx_hash = await self._transact(
                self._contract("agent_marketplace").functions.rateInsight(insight_id, rating)
            )
            logger.info("Insight %d rated %d/5 (tx=%s)", insight_id, rating, tx_hash)
            return tx_hash
        except Exception as e:
            logger.error("Error rating insight: %s", e)
            return None

    async def get_creator_reputation(self, creator_address: str) -> int:
        try:
            return int(await self._contract("agent_marketplace").functions.getCreatorReputation(
                Web3.to_checksum_address(creator_address)
            ).call())
        except Exception as e:
            logger.error("Error getting creator reputation: %s", e)
            return 0

    async def is_top_creator(self, creator_address: str) -> bool:
        try:
            return bool(await self._contract("agent_marketplace").functions.isTopCreator(
                Web3.to_checksum_address(creator_address)
            ).call())
        except Exception as e:
            logger.error("Error checking top creator status: %s", e)
            return False

    def get_network_info(self) -> dict[str, Any]:
        s = self._settings
        return {
            "chain_id": s.chain_id,
            "chain_name": s.chain_name,
            "rpc_url": s.rpc_url,
            "contracts": {
                "aura_token": s.aura_token_address,
                "rewards_minter": s.rewards_minter_address,
                "token_converter": s.token_converter_address,
                "agent_marketplace": s.agent_marketplace_address,
            },
        }
