import logging
from typing import Any, Callable, Dict, Optional, Union, cast

import msgspec
import pandas as pd
import typer

from nearjsonrpc.client import NearClient
from nearjsonrpc.configs.endpoints import KNOWN_ENDPOINTS
from nearjsonrpc.configs.rpc_config import RPCConfig, load_config
from nearjsonrpc.data.schema import RAW_RESPONSE, WaitUntil
from nearjsonrpc.errors import NearRPCError

DEFAULT_WAIT_UNTIL = WaitUntil.EXECUTED_OPTIMISTIC.value
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

app = typer.Typer(help="nearjsonrpc: query the NEAR JSON-RPC API as tables.")


@app.callback()
def configure(
    ctx: typer.Context,
    endpoint: Optional[str] = typer.Option(None, help="mainnet, testnet, betanet or a full URL"),
    timeout: Optional[float] = typer.Option(None, help="Per-attempt timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and retries"),
):
    """Global options shared by every command."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)
    ctx.obj = {"endpoint": endpoint, "timeout": timeout}


def get_client(ctx: typer.Context) -> NearClient:
    """Helper to build a client from .env / NEAR_RPC_* variables and CLI overrides."""
    opts: Dict[str, Any] = ctx.obj or {}
    try:
        base = load_config()
        config = RPCConfig(
            endpoint=opts["endpoint"] if opts.get("endpoint") is not None else base.endpoint,
            timeout=opts["timeout"] if opts.get("timeout") is not None else base.timeout,
            retry_count=base.retry_count,
            initial_backoff=base.initial_backoff,
        )
    except NearRPCError as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED)
        raise typer.Exit(1)
    return NearClient(config)


def parse_block_id(value: Optional[str]) -> Optional[Union[int, str]]:
    """Digits are block heights, anything else is a hash or finality keyword."""
    if value is None:
        return None
    return int(value) if value.isdigit() else value


def _emit(df: pd.DataFrame, as_json: bool) -> None:
    if as_json:
        payload = df[RAW_RESPONSE].iloc[0] if len(df) else []
        typer.echo(msgspec.json.format(msgspec.json.encode(payload), indent=2).decode())
        return

    if df.empty:
        typer.secho("⚠️ No rows returned.", fg=typer.colors.YELLOW)
        return

    with pd.option_context("display.max_columns", None, "display.width", 200, "display.max_colwidth", 60):
        typer.echo(df.drop(columns=[RAW_RESPONSE]).to_string(index=False))


def _run(ctx: typer.Context, action: Callable[[NearClient], pd.DataFrame], as_json: bool) -> None:
    client = get_client(ctx)
    try:
        df = action(client)
    except NearRPCError as e:
        typer.secho(f"❌ {e}", fg=typer.colors.RED)
        raise typer.Exit(1)
    finally:
        client.close()
    _emit(df, as_json)


# --- COMMANDS ---

@app.command("endpoint")
def show_endpoint(ctx: typer.Context):
    """Show the active endpoint and the known network shortcuts."""
    client = get_client(ctx)
    try:
        typer.secho(f"Current NEAR endpoint: {client.get_endpoint()}", fg=typer.colors.CYAN)
    finally:
        client.close()
    for name, url in KNOWN_ENDPOINTS.items():
        typer.echo(f"{name:<10} {url}")


@app.command("account")
def account(
    ctx: typer.Context,
    account_id: str,
    finality: Optional[str] = typer.Option(None, help="final, near-final or optimistic"),
    block_id: Optional[str] = typer.Option(None, help="Block height or hash"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
):
    """Account balance, storage and code hash."""
    _run(ctx, lambda c: c.query_account(account_id, finality=finality, block_id=parse_block_id(block_id)), as_json)


@app.command("block")
def block(
    ctx: typer.Context,
    block_id: str = typer.Argument("final", help="final, optimistic, a height or a hash"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
):
    """Block header summary."""
    _run(ctx, lambda c: c.get_block(cast(Union[int, str], parse_block_id(block_id))), as_json)


@app.command("status")
def status(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
):
    """Node and chain status."""
    _run(ctx, lambda c: c.network_status(), as_json)


@app.command("broadcast")
def broadcast(
    ctx: typer.Context,
    signed_tx_base64: str,
    wait_until: str = typer.Option(DEFAULT_WAIT_UNTIL, help="NONE, INCLUDED, INCLUDED_FINAL, EXECUTED_OPTIMISTIC, FINAL"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
):
    """Submit a signed, base64-encoded transaction."""
    _run(ctx, lambda c: c.broadcast_tx(signed_tx_base64, wait_until=wait_until), as_json)


@app.command("tx-status")
def tx_status(
    ctx: typer.Context,
    tx_hash: str,
    sender_account_id: str,
    wait_until: str = typer.Option(DEFAULT_WAIT_UNTIL, help="NONE, INCLUDED, INCLUDED_FINAL, EXECUTED_OPTIMISTIC, FINAL"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
):
    """Outcome of a submitted transaction."""
    _run(ctx, lambda c: c.get_transaction_status(tx_hash, sender_account_id, wait_until=wait_until), as_json)


@app.command("view")
def view(
    ctx: typer.Context,
    account_id: str,
    method_name: str,
    args: str = typer.Option("{}", help="JSON object of method arguments"),
    finality: Optional[str] = typer.Option(None, help="final, near-final or optimistic"),
    block_id: Optional[str] = typer.Option(None, help="Block height or hash"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
):
    """Call a read-only contract method."""
    try:
        parsed_args = msgspec.json.decode(args)
    except msgspec.DecodeError as e:
        typer.secho(f"❌ --args is not valid JSON: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    _run(
        ctx,
        lambda c: c.call_view_function(
            account_id, method_name, args=parsed_args, finality=finality, block_id=parse_block_id(block_id)
        ),
        as_json,
    )


@app.command("keys")
def keys(
    ctx: typer.Context,
    account_id: str,
    finality: Optional[str] = typer.Option(None, help="final, near-final or optimistic"),
    block_id: Optional[str] = typer.Option(None, help="Block height or hash"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
):
    """Access keys of an account."""
    _run(ctx, lambda c: c.get_access_keys(account_id, finality=finality, block_id=parse_block_id(block_id)), as_json)


@app.command("protocol-config")
def protocol_config(
    ctx: typer.Context,
    finality: Optional[str] = typer.Option(None, help="final, near-final or optimistic"),
    block_id: Optional[str] = typer.Option(None, help="Block height or hash"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
):
    """Protocol configuration at a block."""
    _run(ctx, lambda c: c.get_protocol_config(finality=finality, block_id=parse_block_id(block_id)), as_json)


@app.command("validators")
def validators(
    ctx: typer.Context,
    epoch_id: Optional[str] = typer.Option(None, help="Epoch id (defaults to the current epoch)"),
    block_id: Optional[str] = typer.Option(None, help="Last block height or hash of an epoch"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
):
    """Epoch validators sorted by stake."""
    _run(ctx, lambda c: c.get_validators(epoch_id=epoch_id, block_id=parse_block_id(block_id)), as_json)


def main():
    app()


if __name__ == "__main__":
    main()
