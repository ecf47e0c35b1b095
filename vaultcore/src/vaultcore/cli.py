"""
vaultcore CLI - Inspect spendable outputs, collateral combinations and fees.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer
from loguru import logger
from pydantic import ValidationError

from vaultcore.config import get_settings
from vaultcore.fees import estimate_fee_for_request, max_possible_fee, select_inputs
from vaultcore.models import (
    FeeEstimationRequest,
    InscriptionMarker,
    UnspentOutput,
    VaultCoreError,
)
from vaultcore.subset_sum import subset_sums, to_bounded_steps
from vaultcore.utxo_filter import calculate_balance, spendable_outputs

app = typer.Typer(
    name="vaultcore",
    help="Vault collateral selection and BTC fee estimation",
    add_completion=False,
)


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def _load_records(path: Path) -> list[dict[str, Any]]:
    if not path.exists():
        logger.error(f"File not found: {path}")
        raise typer.Exit(1)

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {path}: {e}")
        raise typer.Exit(1)

    if not isinstance(data, list):
        logger.error(f"Expected a JSON list of records in {path}")
        raise typer.Exit(1)
    return data


def _load_outputs(path: Path) -> list[UnspentOutput]:
    try:
        return [UnspentOutput.from_record(r) for r in _load_records(path)]
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Malformed UTXO record in {path}: {e}")
        raise typer.Exit(1)


def _output_record(utxo: UnspentOutput) -> dict[str, Any]:
    return {
        "txid": utxo.txid,
        "vout": utxo.vout,
        "value": utxo.value,
        "scriptPubKey": utxo.script_pubkey,
    }


@app.command()
def spendable(
    utxo_file: Path = typer.Argument(..., help="JSON list of UTXO records"),
    inscriptions_file: Path | None = typer.Option(
        None, "--inscriptions", "-i", help="JSON list of {txid, vout} inscription records"
    ),
    dust_threshold: int | None = typer.Option(
        None, "--dust-threshold", "-d", help="Hide outputs at or below this value (sats)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """List outputs that are safe to spend (non-dust, no inscription)."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level)

    outputs = _load_outputs(utxo_file)
    markers: list[InscriptionMarker] = []
    if inscriptions_file:
        try:
            markers = [InscriptionMarker.from_record(r) for r in _load_records(inscriptions_file)]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed inscription record in {inscriptions_file}: {e}")
            raise typer.Exit(1)

    threshold = settings.dust_threshold if dust_threshold is None else dust_threshold
    result = spendable_outputs(outputs, markers, threshold)

    if json_output:
        typer.echo(json.dumps([_output_record(u) for u in result], indent=2))
        return

    for utxo in result:
        typer.echo(f"{utxo.outpoint}  {utxo.value:,} sats")
    typer.echo(f"Spendable: {calculate_balance(result):,} sats in {len(result)} outputs")


@app.command(context_settings={"ignore_unknown_options": True})
def combinations(
    amounts: list[int] = typer.Argument(..., help="Vault amounts in sats"),
    steps: int | None = typer.Option(None, "--steps", "-s", help="Maximum slider steps"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Show every collateral total reachable by combining whole vaults."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level)

    try:
        sums = subset_sums(amounts, settings.max_deposit_count)
        bounded = to_bounded_steps(sums, settings.max_step_count if steps is None else steps)
    except VaultCoreError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps({"sums": sums, "steps": bounded, "max_value": sums[-1]}, indent=2))
        return

    typer.echo(f"Achievable sums: {len(sums)}")
    typer.echo(f"Maximum: {sums[-1]:,} sats")
    typer.echo(f"Steps: {', '.join(str(s) for s in bounded)}")


@app.command()
def fee(
    amount: int = typer.Option(..., "--amount", "-a", help="Payment amount in sats"),
    inputs: list[int] = typer.Option(..., "--input", "-i", help="Input value in sats (repeat)"),
    fee_rate: float = typer.Option(..., "--fee-rate", "-r", help="Fee rate in sat/vB"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Estimate the fee for paying an amount from known inputs."""
    setup_logging(log_level or get_settings().log_level)

    try:
        request = FeeEstimationRequest(target_amount=amount, input_values=inputs, fee_rate=fee_rate)
        result = estimate_fee_for_request(request)
    except ValidationError as e:
        logger.error(f"Invalid fee request: {e}")
        raise typer.Exit(1)
    except VaultCoreError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    if json_output:
        typer.echo(result.model_dump_json(indent=2))
        return

    typer.echo(f"Fee: {result.fee:,} sats")
    typer.echo(f"Size: {result.vsize} vB")
    if result.has_change:
        typer.echo(f"Change output: {result.change_amount:,} sats")
    else:
        typer.echo("Change output: none")


@app.command("max-fee")
def max_fee(
    fee_rate: float = typer.Option(..., "--fee-rate", "-r", help="Fee rate in sat/vB"),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Worst-case fee for a single-input transaction with change."""
    setup_logging(log_level or get_settings().log_level)

    try:
        typer.echo(str(max_possible_fee(fee_rate)))
    except VaultCoreError as e:
        logger.error(str(e))
        raise typer.Exit(1)


@app.command()
def select(
    utxo_file: Path = typer.Argument(..., help="JSON list of spendable UTXO records"),
    amount: int = typer.Option(..., "--amount", "-a", help="Payment amount in sats"),
    fee_rate: float = typer.Option(..., "--fee-rate", "-r", help="Fee rate in sat/vB"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Pick inputs (largest first) to pay an amount and report the fee."""
    setup_logging(log_level or get_settings().log_level)

    outputs = _load_outputs(utxo_file)
    try:
        selection = select_inputs(outputs, amount, fee_rate)
    except VaultCoreError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    if json_output:
        payload = {
            "selected": [_output_record(u) for u in selection.selected],
            "total_value": selection.total_value,
            "fee": selection.fee,
            "change_amount": selection.change_amount,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    for utxo in selection.selected:
        typer.echo(f"{utxo.outpoint}  {utxo.value:,} sats")
    typer.echo(f"Total: {selection.total_value:,} sats")
    typer.echo(f"Fee: {selection.fee:,} sats")
    typer.echo(f"Change: {selection.change_amount:,} sats")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
