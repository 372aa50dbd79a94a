"""Unit tests for CLI argument parsing."""
from __future__ import annotations

import pytest

from vaultlens.cli import build_parser

from tests.conftest import LIQUID_ETH, SAFE


class TestBuildParser:
    def test_inspect_command(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["inspect", SAFE])
        assert args.command == "inspect"
        assert args.address == SAFE
        assert args.snapshot is None

    def test_inspect_with_snapshot(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["inspect", SAFE, "--snapshot", "vault.yaml"])
        assert args.snapshot == "vault.yaml"

    def test_simulate_defaults(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["simulate", SAFE])
        assert args.command == "simulate"
        assert args.prices == []
        assert args.debt is None
        assert args.target_hf is None

    def test_simulate_price_overrides(self) -> None:
        parser = build_parser()
        args = parser.parse_args(
            ["simulate", SAFE, "--price", f"{LIQUID_ETH}=1500", "--price", f"{SAFE}=0.5"]
        )
        assert args.prices == [(LIQUID_ETH, 1500.0), (SAFE, 0.5)]

    def test_simulate_debt(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["simulate", SAFE, "--debt", "250"])
        assert args.debt == 250.0

    def test_simulate_target_hf(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["simulate", SAFE, "--target-hf", "0.8"])
        assert args.target_hf == 0.8

    def test_debt_and_target_hf_exclusive(self) -> None:
        parser = build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["simulate", SAFE, "--debt", "1", "--target-hf", "0.8"])

    @pytest.mark.parametrize(
        "argv",
        [
            ["inspect", "0x1234"],
            ["inspect", "not-an-address"],
            ["simulate", SAFE, "--price", "1500"],
            ["simulate", SAFE, "--price", f"{LIQUID_ETH}=abc"],
            ["simulate", SAFE, "--price", f"{LIQUID_ETH}=-1"],
            ["simulate", SAFE, "--debt", "-5"],
        ],
    )
    def test_rejects_invalid_arguments(self, argv: list[str]) -> None:
        parser = build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(argv)

    def test_config_flag(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["--config", "/tmp/c.yaml", "inspect", SAFE])
        assert args.config == "/tmp/c.yaml"

    def test_log_level_flag(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["--log-level", "DEBUG", "inspect", SAFE])
        assert args.log_level == "DEBUG"

    def test_no_command(self) -> None:
        parser = build_parser()
        args = parser.parse_args([])
        assert args.command is None
