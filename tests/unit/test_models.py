"""
tests/unit/test_models.py - Data model tests.
"""

import pytest
from decimal import Decimal

from core.constants import ErrorCode, EthereumRole, EvaluationStage, MetadataSource
from core.exceptions import ValidationError
from core.models import ArbitrageResult, GasDetails, OpportunityRecord, TokenMetadata

DOC = {
    "tokenSymbol": "PEPE",
    "buyChain": "Ethereum",
    "sellChain": "solana",
    "buyAddress": "0x6982508145454Ce325dDbE47a25d4ec3d2311933",
    "sellAddress": "7vfCXTUXx5WJV5JADk17DUJ4ksgau7utNKj4b963voxs",
    "ethereumRole": "buy",
}


class TestOpportunityRecord:
    """Parsing datastore documents."""

    def test_from_camel_case(self):
        record = OpportunityRecord.from_dict(DOC)
        assert record.token_symbol == "PEPE"
        assert record.buy_chain == "ethereum"
        assert record.sell_chain == "solana"
        assert record.ethereum_role == EthereumRole.BUY
        assert record.is_cross_chain

    def test_from_snake_case(self):
        doc = {
            "token_symbol": "PEPE",
            "buy_chain": "base",
            "sell_chain": "base",
            "buy_address": "0xabc",
            "sell_address": "0xabc",
        }
        record = OpportunityRecord.from_dict(doc)
        assert record.ethereum_role is None
        assert not record.is_cross_chain

    def test_missing_fields_listed(self):
        doc = {k: v for k, v in DOC.items() if k not in ("buyAddress", "sellChain")}
        with pytest.raises(ValidationError) as exc_info:
            OpportunityRecord.from_dict(doc)
        assert exc_info.value.code == ErrorCode.VALIDATION_MISSING_FIELD
        assert set(exc_info.value.details["missing"]) == {"buyAddress", "sellChain"}

    def test_blank_field_is_missing(self):
        with pytest.raises(ValidationError):
            OpportunityRecord.from_dict({**DOC, "tokenSymbol": "   "})

    def test_invalid_role(self):
        with pytest.raises(ValidationError) as exc_info:
            OpportunityRecord.from_dict({**DOC, "ethereumRole": "both"})
        assert exc_info.value.code == ErrorCode.VALIDATION_INVALID_FIELD

    @pytest.mark.parametrize("role", [None, "", "none"])
    def test_empty_roles(self, role):
        assert OpportunityRecord.from_dict({**DOC, "ethereumRole": role}).ethereum_role is None

    def test_non_mapping_rejected(self):
        with pytest.raises(ValidationError):
            OpportunityRecord.from_dict(["not", "a", "dict"])

    def test_round_trip_to_dict(self):
        assert OpportunityRecord.from_dict(DOC).to_dict()["buyChain"] == "ethereum"

    def test_record_is_immutable(self):
        record = OpportunityRecord.from_dict(DOC)
        with pytest.raises(AttributeError):
            record.buy_chain = "base"


class TestTokenMetadata:
    """Metadata validation and confidence flag."""

    def test_negative_decimals_rejected(self):
        with pytest.raises(ValidationError):
            TokenMetadata(address="0x1", symbol="X", decimals=-1)

    def test_bool_decimals_rejected(self):
        with pytest.raises(ValidationError):
            TokenMetadata(address="0x1", symbol="X", decimals=True)

    def test_defaulted_flag(self):
        meta = TokenMetadata(address="0x1", symbol="UNKNOWN", decimals=18, source=MetadataSource.DEFAULTED)
        assert meta.is_defaulted
        assert meta.to_dict()["source"] == "DEFAULTED"


class TestArbitrageResult:
    """Result serialization."""

    def test_success_serializes_decimals_as_strings(self):
        result = ArbitrageResult(
            success=True,
            stage=EvaluationStage.EVALUATED,
            profit=Decimal("12.5"),
            gas_cost=Decimal("1.25"),
            gas_details=GasDetails(21000, 1_000_000_000, Decimal("3000")),
            buy_price=Decimal("2"),
            sell_price=Decimal("2.05"),
            token_decimals={"ethereum": 18},
        )
        data = result.to_dict()

        assert data["profit"] == "12.5"
        assert data["gas_cost"] == "1.25"
        assert data["gas_details"]["gas_price_wei"] == 1_000_000_000
        assert data["token_decimals"] == {"ethereum": 18}
        assert result.is_profitable

    def test_failure_carries_only_error(self):
        result = ArbitrageResult(
            success=False,
            stage=EvaluationStage.FAILED,
            error="boom",
            error_code=ErrorCode.QUOTE_FETCH_FAILED,
        )
        data = result.to_dict()

        assert data["error"] == "boom"
        assert data["error_code"] == "QUOTE_FETCH_FAILED"
        assert "profit" not in data
        assert not result.is_profitable
