"""Command line interface for qrseal."""

from __future__ import annotations

import getpass
import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Callable

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from qrseal import __version__, service
from qrseal.container import inspect
from qrseal.crypto import kdf
from qrseal.errors import (
    CapacityExceeded,
    CompressionError,
    CryptoError,
    DecryptionFailed,
    ImageReadError,
    InvalidPassword,
    InvalidSalt,
    QrCodeError,
    QrCodeNotFound,
    SerializationError,
    TextDecodingError,
)
from qrseal.password_strength import MAX_PASSWORD_LENGTH, evaluate_password
from qrseal.qr import QR_CAPACITY, scan_qr

EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_CRYPTO = 2
EXIT_FS = 3
EXIT_CORRUPT = 4
EXIT_QR = 5

console = Console()


def _package_version() -> str:
    try:
        return version("qrseal")
    except PackageNotFoundError:
        return __version__


def _prompt_password(password_opt: str | None) -> str:
    if password_opt is not None:
        return password_opt
    return getpass.getpass(f"Password (max {MAX_PASSWORD_LENGTH} chars): ")


def _read_transport_text(source: Path, from_text: bool) -> str:
    if from_text:
        return source.read_text(encoding="ascii", errors="replace").strip()
    return scan_qr(source)


def _handle_action(action: Callable[[], None]) -> int:
    try:
        action()
    except DecryptionFailed:
        console.print("[red]Wrong password or corrupted data[/red]")
        return EXIT_CRYPTO
    except InvalidPassword as exc:
        console.print(f"[red]Invalid password:[/red] {exc}")
        return EXIT_CRYPTO
    except (InvalidSalt, SerializationError, TextDecodingError, CompressionError) as exc:
        console.print(f"[red]Error: payload is corrupted or not a qrseal code:[/red] {exc}")
        return EXIT_CORRUPT
    except CryptoError as exc:
        console.print(f"[red]Crypto error:[/red] {exc}")
        return EXIT_CRYPTO
    except CapacityExceeded as exc:
        console.print(
            f"[red]Payload too large for one QR code:[/red] {exc.length} characters "
            f"(must stay below {exc.limit}). Try a smaller or more compressible file."
        )
        return EXIT_QR
    except (QrCodeNotFound, ImageReadError) as exc:
        console.print(f"[red]Could not read QR code:[/red] {exc}")
        return EXIT_QR
    except QrCodeError as exc:
        console.print(f"[red]QR error:[/red] {exc}")
        return EXIT_QR
    except FileExistsError as exc:
        console.print(f"[red]{exc}. Use --overwrite to replace.[/red]")
        return EXIT_FS
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/red] {exc}")
        return EXIT_FS
    except PermissionError as exc:
        console.print(f"[red]Permission denied:[/red] {exc}")
        return EXIT_FS
    except OSError as exc:  # noqa: BLE001
        console.print(f"[red]Filesystem error:[/red] {exc}")
        return EXIT_FS
    return EXIT_SUCCESS


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=False,
)
@click.version_option(version=_package_version(), prog_name="qrseal")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log pipeline details to stderr.")
def cli(verbose: bool) -> None:
    """Pack a password-protected file into a single QR code and back."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@cli.command(
    help="Encrypt a file into a QR code image (PNG).",
    epilog="Examples:\n  qrseal encode note.txt\n  qrseal encode key.pem key.png --text-out key.txt",
)
@click.argument("input_path", type=click.Path(path_type=Path))
@click.argument("output_path", required=False, type=click.Path(path_type=Path))
@click.option("--password", "password_opt", help="Encryption password (will prompt if omitted).")
@click.option(
    "--text-out",
    "text_out",
    type=click.Path(path_type=Path),
    help="Also write the printable transport string to this file.",
)
@click.option(
    "--overwrite/--no-overwrite",
    default=False,
    help="Overwrite output if it already exists.",
)
@click.pass_context
def encode(
    ctx: click.Context,
    input_path: Path,
    output_path: Path | None,
    password_opt: str | None,
    text_out: Path | None,
    overwrite: bool,
) -> None:
    password = _prompt_password(password_opt)
    target = output_path or input_path.with_suffix(f"{input_path.suffix}.png")

    strength = evaluate_password(password)
    if password and strength.is_weak:
        console.print(f"[yellow]Warning: weak password ({'; '.join(strength.feedback)})[/yellow]")

    outcome: dict[str, service.EncodeResult] = {}

    def _run() -> None:
        result = service.encode_file(input_path, password)
        service.write_encoded(result, target, text_path=text_out, overwrite=overwrite)
        outcome["result"] = result

    code = _handle_action(_run)
    if code == EXIT_SUCCESS:
        length = len(outcome["result"].text)
        console.print(f"[green]QR code written to[/green] {target} ({length}/{QR_CAPACITY} characters).")
    ctx.exit(code)


@cli.command(
    help="Scan a qrseal QR code and decrypt it back into the original file.",
    epilog="Examples:\n  qrseal decode note.txt.png note.txt\n  qrseal decode key.txt key.pem --from-text",
)
@click.argument("source", type=click.Path(path_type=Path))
@click.argument("output_path", required=False, type=click.Path(path_type=Path))
@click.option("--password", "password_opt", help="Decryption password (will prompt if omitted).")
@click.option(
    "--from-text",
    is_flag=True,
    default=False,
    help="SOURCE is a file holding the transport string instead of an image.",
)
@click.option(
    "--overwrite/--no-overwrite",
    default=False,
    help="Overwrite existing file at the destination.",
)
@click.pass_context
def decode(
    ctx: click.Context,
    source: Path,
    output_path: Path | None,
    password_opt: str | None,
    from_text: bool,
    overwrite: bool,
) -> None:
    password = _prompt_password(password_opt)
    out_path = output_path or source.with_suffix(source.suffix + ".out")

    def _run() -> None:
        text = _read_transport_text(source, from_text)
        data = service.decode_text(text, password)
        service.write_decoded(data, out_path, overwrite=overwrite)

    code = _handle_action(_run)
    if code == EXIT_SUCCESS:
        console.print(f"[green]Decrypted to[/green] {out_path}.")
    ctx.exit(code)


@cli.command(
    help="Describe a qrseal payload without decrypting it.",
    epilog="Example:\n  qrseal info note.txt.png",
)
@click.argument("source", type=click.Path(path_type=Path))
@click.option(
    "--from-text",
    is_flag=True,
    default=False,
    help="SOURCE is a file holding the transport string instead of an image.",
)
@click.pass_context
def info(ctx: click.Context, source: Path, from_text: bool) -> None:
    def _run() -> None:
        details = inspect(_read_transport_text(source, from_text))
        params = kdf.FORMAT_PARAMS
        table = Table(show_header=False, box=None)
        table.add_row("Transport", f"{details.text_length} characters (limit < {QR_CAPACITY})")
        table.add_row("Record", f"{details.record_length} bytes")
        table.add_row("Salt", f"{details.salt_length} bytes")
        table.add_row("Encrypted", f"{details.encrypted_length} bytes (nonce + ciphertext + tag)")
        table.add_row("Ciphertext", f"{details.ciphertext_length} bytes")
        table.add_row(
            "Argon2id",
            f"mem={params.mem_cost_kib} KiB, time={params.time_cost}, p={params.parallelism}",
        )
        table.add_row("Cipher", "ChaCha20-Poly1305")
        console.print("[bold]qrseal payload[/bold]")
        console.print(table)

    ctx.exit(_handle_action(_run))


def main(argv: list[str] | None = None) -> int:
    try:
        return cli.main(args=argv, prog_name="qrseal", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return EXIT_USAGE
    except SystemExit as exc:  # noqa: TRY003
        code = exc.code if isinstance(exc.code, int) else EXIT_USAGE
        return code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
