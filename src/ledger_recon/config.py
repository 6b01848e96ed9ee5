"""Configuration loader and validation for reconciliation settings."""

from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Column names used by the probate accounting export
INTERNAL_PREFIX = "transactiontable_accountings_ProbateMain::"


class SourceMapping(BaseModel):
    """Declarative field mapping for one ledger source."""

    account_field: str
    date_field: str = "Date"
    amount_field: str = "Amount"
    description_field: Optional[str] = None
    check_number_field: Optional[str] = None
    type_field: Optional[str] = None
    name_field: Optional[str] = None


class InputConfig(BaseModel):
    """Configuration for ledger loading and field normalization."""

    encoding: str = "utf-8"
    delimiter: str = ","
    date_formats: list[str] = Field(
        default_factory=lambda: ["%m/%d/%Y", "%Y-%m-%d", "%m/%d/%y"]
    )
    bank: SourceMapping = Field(
        default_factory=lambda: SourceMapping(
            account_field="Account Number",
            description_field="Description",
            check_number_field="Additional Reference",
            type_field="Type",
        )
    )
    internal: SourceMapping = Field(
        default_factory=lambda: SourceMapping(
            account_field=f"{INTERNAL_PREFIX}ACBT_AccountNumber",
            description_field="Description1",
            check_number_field="Check Number",
            type_field="Transaction Type",
            name_field=f"{INTERNAL_PREFIX}DI FullName",
        )
    )


class MatchingTier(BaseModel):
    """A matching tier with priority and the strategy it runs."""

    name: str
    strategy: str
    description: str = ""
    priority: int = 99
    enabled: bool = True
    tolerance_days: Optional[int] = None


class MatchingConfig(BaseModel):
    """Configuration for the matching engine."""

    # Reserved for a stricter date tier; the default tiers do not read it
    exact_match_days: int = 10
    close_match_days: int = 30
    amount_tolerance: float = 0.01
    check_indicators: list[str] = Field(
        default_factory=lambda: ["check", "chk", "check paid", "disbursement"]
    )
    tiers: list[MatchingTier] = Field(
        default_factory=lambda: [
            MatchingTier(
                name="date_amount",
                strategy="date_amount",
                description="Amount match with date inside the close-match window",
                priority=1,
            ),
            MatchingTier(
                name="check_number",
                strategy="check_number",
                description="Check number and amount match, any date",
                priority=2,
                enabled=False,
            ),
        ]
    )


class SheetNames(BaseModel):
    """Sheet titles used in per-account workbooks."""

    bank: str = "Bank Transactions"
    internal: str = "Our Transactions"
    matched: str = "Matched"
    close_matches: str = "Close Matches"
    check_matches: str = "Check Matches"
    bank_only: str = "Bank Only"
    my_only: str = "Our Records Only"
    summary: str = "Summary"


class OutputConfig(BaseModel):
    """Configuration for report output."""

    folder_template: str = "Reconciliation_{period}_{date}"
    account_filename_template: str = "{name}_{account}_Reconciliation_{period}.xlsx"
    summary_filename_template: str = "Master_Summary_{period}.xlsx"
    sheets: SheetNames = Field(default_factory=SheetNames)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ReconConfig(BaseModel):
    """Main configuration model for reconciliation."""

    input: InputConfig = Field(default_factory=InputConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return {
        "input": {
            "encoding": "utf-8",
            "delimiter": ",",
            "date_formats": ["%m/%d/%Y", "%Y-%m-%d", "%m/%d/%y"],
            "bank": {
                "account_field": "Account Number",
                "date_field": "Date",
                "amount_field": "Amount",
                "description_field": "Description",
                "check_number_field": "Additional Reference",
                "type_field": "Type",
                "name_field": None,
            },
            "internal": {
                "account_field": f"{INTERNAL_PREFIX}ACBT_AccountNumber",
                "date_field": "Date",
                "amount_field": "Amount",
                "description_field": "Description1",
                "check_number_field": "Check Number",
                "type_field": "Transaction Type",
                "name_field": f"{INTERNAL_PREFIX}DI FullName",
            },
        },
        "matching": {
            "exact_match_days": 10,
            "close_match_days": 30,
            "amount_tolerance": 0.01,
            "check_indicators": ["check", "chk", "check paid", "disbursement"],
            "tiers": [
                {
                    "name": "date_amount",
                    "strategy": "date_amount",
                    "description": "Amount match with date inside the close-match window",
                    "priority": 1,
                    "enabled": True,
                },
                {
                    "name": "check_number",
                    "strategy": "check_number",
                    "description": "Check number and amount match, any date",
                    "priority": 2,
                    # Bank feeds seen so far carry no check numbers
                    "enabled": False,
                },
            ],
        },
        "output": {
            "folder_template": "Reconciliation_{period}_{date}",
            "account_filename_template": "{name}_{account}_Reconciliation_{period}.xlsx",
            "summary_filename_template": "Master_Summary_{period}.xlsx",
            "sheets": {
                "bank": "Bank Transactions",
                "internal": "Our Transactions",
                "matched": "Matched",
                "close_matches": "Close Matches",
                "check_matches": "Check Matches",
                "bank_only": "Bank Only",
                "my_only": "Our Records Only",
                "summary": "Summary",
            },
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    }


def load_config(config_path: Optional[Path] = None) -> ReconConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ReconConfig object with loaded or default settings
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        with open(config_path, "r") as f:
            user_config = yaml.safe_load(f) or {}

        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    return ReconConfig(**config_dict)


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge ``override`` into ``base``; lists are replaced, not merged."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Write the default configuration as a commented YAML file.

    Args:
        output_path: Path to write the configuration file
    """
    yaml_content = """# Bank / internal ledger reconciliation configuration
# Field names under input.bank and input.internal must match the ledger headers

"""
    yaml_content += yaml.dump(get_default_config(), default_flow_style=False, sort_keys=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
