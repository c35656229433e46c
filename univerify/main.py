import argparse
import asyncio
import json
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

from univerify.api.exceptions import ApiError
from univerify.config.settings import Settings
from univerify.logging.logger import Log
from univerify.services import Services, build_services
from univerify.upload.file_loader import load_document_file
from univerify.upload.models import UploadProgress
from univerify.verification.links import build_verification_link, parse_verification_link
from univerify.wallet.messages import login_consent_message


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="univerify",
        description="Upload, confirm and verify blockchain-anchored documents.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("health", help="check that the backend is up")

    for name in ("login", "signup"):
        auth = commands.add_parser(name, help=f"{name} with a wallet signature")
        auth.add_argument("--wallet-address", help="defaults to the configured signer's address")
        auth.add_argument("--signature", help="pre-computed signature of --message")
        auth.add_argument("--message", help="message that was signed")
        if name == "signup":
            auth.add_argument("--name", required=True)
            auth.add_argument("--email", required=True)

    commands.add_parser("logout", help="forget the stored session")

    upload = commands.add_parser("upload", help="upload a file and wait for confirmation")
    upload.add_argument("paths", nargs="+", type=Path)
    upload.add_argument("--folder")
    upload.add_argument("--description")
    upload.add_argument("--content-type", help="override the guessed MIME type")
    upload.add_argument("--max-size", type=int, help="maximum file size in bytes")

    wait = commands.add_parser("wait", help="wait for a transaction to be confirmed")
    wait.add_argument("transaction_hash")
    wait.add_argument("--retries", type=int)
    wait.add_argument("--delay-ms", type=int)

    verify = commands.add_parser("verify", help="verify a document by id and hash")
    verify.add_argument("document_id")
    verify.add_argument("hash")

    verify_link = commands.add_parser("verify-link", help="verify a document from its link")
    verify_link.add_argument("url")

    link = commands.add_parser("link", help="print the shareable verification link")
    link.add_argument("document_id")
    link.add_argument("hash")

    commands.add_parser("documents", help="list documents owned by the session's wallet")

    share = commands.add_parser("share", help="share a verified document by email")
    share.add_argument("document_id")
    share.add_argument("email")

    delete = commands.add_parser("delete", help="delete an uploaded file")
    delete.add_argument("public_id")

    return parser


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def _print(value: Any) -> None:
    print(json.dumps(_to_jsonable(value), indent=2, default=str))


def _log_progress(progress: UploadProgress) -> None:
    if progress.error:
        Log.error(f"[{progress.phase.value}] {progress.message}: {progress.error}")
    else:
        Log.info(f"[{progress.phase.value} {progress.progress}%] {progress.message}")


async def _authenticate(services: Services, args: argparse.Namespace) -> Any:
    signer = services.signer
    wallet_address = args.wallet_address or (signer.address if signer is not None else None)
    if not wallet_address:
        raise ApiError("A wallet address or WALLET_PRIVATE_KEY is required", 400)
    message = args.message
    signature = args.signature
    if signature is None:
        message = message or login_consent_message(wallet_address)
        signature = await signer.sign_message(message) if signer is not None else ""
    message = message or ""

    if args.command == "signup":
        return await services.api.signup(
            wallet_address=wallet_address,
            signature=signature,
            message=message,
            name=args.name,
            email=args.email,
        )
    return await services.api.login(
        wallet_address=wallet_address, signature=signature, message=message
    )


async def _upload(services: Services, args: argparse.Namespace) -> Any:
    files = [load_document_file(path, args.content_type) for path in args.paths]
    if len(files) == 1:
        return await services.orchestrator.upload_file(
            files[0],
            folder=args.folder,
            description=args.description,
            on_progress=_log_progress,
        )
    return await services.orchestrator.upload_files(
        files,
        folder=args.folder,
        description=args.description,
        on_progress=lambda file, progress: _log_progress(progress),
    )


async def run_command(services: Services, args: argparse.Namespace) -> int:
    """Dispatch one parsed command. Returns the process exit code."""
    command = args.command
    if command == "health":
        health = await services.api.health_check()
        _print(health)
        return 0 if health.is_healthy else 1
    if command in ("login", "signup"):
        _print(await _authenticate(services, args))
        return 0
    if command == "logout":
        services.api.logout()
        Log.info("Session cleared")
        return 0
    if command == "upload":
        _print(await _upload(services, args))
        return 0
    if command == "wait":
        _print(
            await services.poller.wait_for_confirmation(
                args.transaction_hash, max_retries=args.retries, delay_ms=args.delay_ms
            )
        )
        return 0
    if command in ("verify", "verify-link"):
        if command == "verify-link":
            document_id, document_hash = parse_verification_link(args.url)
        else:
            document_id, document_hash = args.document_id, args.hash
        result = await services.resolver.verify_document(document_id, document_hash)
        _print(result)
        return 0 if result.is_valid else 1
    if command == "link":
        print(build_verification_link(services.settings.app_url, args.document_id, args.hash))
        return 0
    if command == "documents":
        _print(await services.api.list_documents())
        return 0
    if command == "share":
        _print(await services.api.share_document(args.document_id, args.email))
        return 0
    if command == "delete":
        _print(await services.api.delete_file(args.public_id))
        return 0
    raise ValueError(f"Unknown command '{command}'")


async def _main(args: argparse.Namespace, settings: Settings) -> int:
    max_size = getattr(args, "max_size", None)
    services = build_services(settings, max_size_bytes=max_size)
    try:
        return await run_command(services, args)
    except ApiError as exc:
        Log.error(f"{exc.message} (status {exc.status})")
        return 1
    except (OSError, ValueError) as exc:
        Log.error(str(exc))
        return 2
    finally:
        await services.aclose()


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> logging -> services -> command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    return asyncio.run(_main(args, settings))


if __name__ == "__main__":
    sys.exit(main())
